"""
Starship Commander
==================

Level, streak and reward engine with an atomic mission completion
orchestrator.

    from starship.core.services import ServiceContainer

    container = ServiceContainer()
    await container.initialize()
    await container.completion.complete_mission(mission_id, user_id)
"""

__version__ = "1.0.0"
