"""
upload_items: carga one-shot de conexiones de clientes a Azure Cosmos DB.
"""

__version__ = "1.0.0"
