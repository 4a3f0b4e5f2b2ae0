import monetize_ai as ma


def test_package_exports():
    # Ensure the package exposes expected symbols
    assert hasattr(ma, "simulate_revenue")
    assert hasattr(ma, "SimulationParams")
    assert hasattr(ma, "aggregate")
    assert hasattr(ma, "to_delimited_text")
