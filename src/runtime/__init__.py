# path: src/runtime/__init__.py

"""
Runtime glue between agents and the build coordinator.

- build_action:        per-agent tick-driven build worker
- sweeper:             periodic removal of completed builds
- error_handling:      guarded ticks that report exceptions as events
- world:               host-world interface the build action drives
- memory_world:        in-memory host world for the demo and tests
- collab_runtime_main: reference wiring of config, monitoring and worker threads
"""
