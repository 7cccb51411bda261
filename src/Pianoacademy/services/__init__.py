"""Backend clients: REST (requests), Firestore, auth provider and push gateway."""
