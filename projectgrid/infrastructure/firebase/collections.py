"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent.
"""

COLLECTION_USERS = "users"
# Document ID = normalized email, value = {user_id}. Created with
# create-with-id so a second registration of the same email gets a 409.
COLLECTION_USER_EMAILS = "user_emails"
COLLECTION_VERIFICATION_TOKENS = "verification_tokens"

COLLECTION_WORKSPACES = "workspaces"
COLLECTION_PROJECTS = "projects"
COLLECTION_TASKS = "tasks"
COLLECTION_COMMENTS = "comments"
# Append-only; keyed by resource_id for per-resource history.
COLLECTION_ACTIVITIES = "activities"
