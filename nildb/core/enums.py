from enum import Enum


class SupportedDatabase(str, Enum):
    MEMORY = "memory"
    DYNAMO = "dynamo"
    MONGO = "mongo"
    OPENSEARCH = "opensearch"
    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"


SQL_DATABASES = (
    SupportedDatabase.SQLITE,
    SupportedDatabase.MYSQL,
    SupportedDatabase.POSTGRES,
)

# Dialects that store everything in a single file and have no named database
FILE_BASED_DATABASES = (SupportedDatabase.SQLITE,)


class PropertyMatch(str, Enum):
    """How a property query compares the stored value with the query value"""
    EQ = "eq"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"
    CONTAINS = "contains"
