"""Shared fixtures."""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def infections():
    """Small binary infection table: patients x pathogens."""
    return pd.DataFrame(
        {
            "flu":     [1, 1, 0, 0, 1, 0],
            "covid":   [1, 1, 0, 0, 0, 0],
            "strep":   [0, 0, 1, 1, 0, 1],
            "measles": [0, 0, 1, 0, 0, 1],
            "group":   ["viral", "viral", "bacterial", "bacterial", "viral", "bacterial"],
        },
        index=pd.Index(["p1", "p2", "p3", "p4", "p5", "p6"], name="patient"),
    )


@pytest.fixture
def random_points():
    """Continuous points with no tied distances."""
    rng = np.random.default_rng(7)
    return rng.normal(size=(15, 3))
