from pymongo import MongoClient
from config import settings

class Database:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Database, cls).__new__(cls)
            cls._instance._initialize_connections()
        return cls._instance

    def _initialize_connections(self):
        # MongoClient connects lazily, so importing this module never blocks on the server
        self.db1_uri = settings.DB1_URI
        self.client1 = MongoClient(self.db1_uri)

    def get_client1(self):
        return self.client1

    def close_connections(self):
        """Close all database connections"""
        self.client1.close()

# Create a singleton instance
db = Database()

# Export the clients for easy access
client1 = db.get_client1()


def get_database():
    """The application database every service defaults to."""
    return client1[settings.DB1_NAME]
