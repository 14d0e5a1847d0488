"""
Service layer.

``ContainerService`` holds the registry rules; the storage backends in
``container_store`` can be swapped (in-memory list or SQLite table)
without changing API handlers.
"""
