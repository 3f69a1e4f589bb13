"""User accounts: data transfer objects, model, repository, service and HTTP handlers."""