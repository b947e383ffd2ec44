"""Values shared by the client and the server: operations and responses."""
