# In-memory collaborator backends and their interfaces
