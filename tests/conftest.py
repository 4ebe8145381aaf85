# tests/conftest.py
import asyncio

import pytest

from leash_world.config import LeashConfig
from leash_world.core.grid import SquareGrid
from leash_world.core.systems_manager import SystemsManager
from leash_world.core.time_manager import ManualClock
from leash_world.core.world import Scene
from leash_world.systems.leash.enforcement import LeashEnforcementSystem
from leash_world.systems.leash.propagation import LeashPropagationSystem
from leash_world.systems.leash.relation import apply_leash
from leash_world.utils.notifications import Notifications


class LeashHarness:
    """Scene wired with the leash systems, a manual clock and private notices.

    Grid defaults to 100px cells worth 5 units each, so 1 unit = 20px.
    Entities are 1x1 cells and are placed by their centre.
    """

    def __init__(self, grid_size=100.0, grid_distance=5.0, diagonals="equidistant", **settings):
        self.settings = LeashConfig(**settings)
        self.clock = ManualClock()
        self.notices = Notifications()
        self.scene = Scene("scene", SquareGrid(grid_size, grid_distance, diagonals))
        self.scene.leash_settings = self.settings
        self.scene.systems_manager = SystemsManager()
        self.propagation = LeashPropagationSystem(self.scene, self.settings, clock=self.clock)
        self.enforcement = LeashEnforcementSystem(self.scene, self.settings)
        self.scene.systems_manager.register(self.propagation)
        self.scene.systems_manager.register(self.enforcement)

    @property
    def half(self):
        return self.scene.grid.size / 2

    def place(self, cx, cy, name=""):
        return self.scene.spawn(cx - self.half, cy - self.half, name=name)

    def center(self, entity_id):
        pos = self.scene.position(entity_id)
        return (pos.x + self.half, pos.y + self.half)

    def leash(self, target, handler, distance):
        return asyncio.run(
            apply_leash(
                self.scene, target, handler, distance,
                settings=self.settings, notices=self.notices,
            )
        )

    def move_center(self, entity_id, cx, cy):
        return asyncio.run(self.scene.move_entity(entity_id, cx - self.half, cy - self.half))


@pytest.fixture
def make_harness():
    return LeashHarness
