from pyinicfg.options import almost_equal, approximates


def test_almost_equal():
    assert almost_equal(3.14159, 3.14159)
    assert almost_equal(0.0, 0.0)
    assert almost_equal(1.0, 1.0 + 1e-8)
    assert not almost_equal(1.0, 1.001)
    assert not almost_equal(3.14159, 3.1416)


def test_almost_equal_ulp_count():
    a = 1.0
    b = 1.0 + 4 * 1.1920929e-07
    assert almost_equal(a, b)
    assert not almost_equal(a, b, ulp=1)


def test_approximates_default_precision():
    assert approximates(0.1, 0.1009)
    assert not approximates(0.1, 0.5)
    assert approximates(1000.0, 1000.9)
    assert not approximates(1000.0, 1001.5)


def test_approximates_explicit_precision():
    assert approximates(0.1, 0.15, 0.1)
    assert not approximates(0.1, 0.15, 0.01)
