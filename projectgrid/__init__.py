"""ProjectGrid backend: account lifecycle, workspaces and projects over Firestore."""
