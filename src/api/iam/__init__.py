"""Identity and access management bounded context: tenants and memberships."""
