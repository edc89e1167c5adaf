"""Shared fixtures: a small symmetric skinned mesh."""

import pytest

from weightforge.host.memory_mesh import InMemorySkinnedMesh

BONES = [
    "Hips",      # 0
    "Spine",     # 1
    "Arm_L",     # 2
    "Arm_R",     # 3
    "Hand.L",    # 4
    "Hand.R",    # 5
    "LeftLeg",   # 6
    "RightLeg",  # 7
    "Tail_L",    # 8 (no Tail_R)
]


def make_mesh() -> InMemorySkinnedMesh:
    positions = [
        (1.0, 0.0, 0.0),     # 0 left arm
        (-1.0, 0.0, 0.0),    # 1 right arm
        (0.0, 1.0, 0.0),     # 2 centre
        (2.0, 2.0, 0.0),     # 3 no mirror partner
        (0.5, 0.5, 0.5),     # 4 left leg
        (-0.5, 0.5, 0.5),    # 5 right leg
    ]
    bone_indices = [
        [2, 1, 8, 0],
        [3, 0, 0, 0],
        [2, 3, 0, 0],
        [1, 0, 0, 0],
        [4, 6, 0, 0],
        [0, 0, 0, 0],
    ]
    weights = [
        [0.6, 0.3, 0.1, 0.0],
        [1.0, 0.0, 0.0, 0.0],
        [0.7, 0.3, 0.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
        [0.5, 0.25, 0.25, 0.0],
        [1.0, 0.0, 0.0, 0.0],
    ]
    return InMemorySkinnedMesh(positions, BONES, bone_indices, weights)


@pytest.fixture
def mesh():
    return make_mesh()
