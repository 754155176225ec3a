"""
Carga one-shot: conexiones de clientes (SQL Server / snapshot JSON) -> Cosmos DB.

Este paquete está diseñado para ejecutarse como job puntual (CLI),
no como un sync continuo: no hay cursor, ni watermark, ni diff incremental.

Protocolo de cada corrida:
- Carga el lote canónico desde SQL (o desde connections.json).
- Lee del contenedor el partition key path (una sola vez).
- Limpia el contenedor (drain) o, en modo prune, borra solo lo que sobra.
- UPSERT de cada registro; un fallo no detiene al resto.
- Reporte final: éxitos, errores y total.
"""
