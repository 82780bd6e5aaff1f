# Usage record stores and collaborator lookups
