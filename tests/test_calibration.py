import pytest

from oiltanklevel.calibration import CalibrationInterpolator, load_calibration_mapping
from oiltanklevel.errors import OutOfCalibrationRange


def test_midpoint_interpolation(calibration):
    level, volume = CalibrationInterpolator(calibration, liters_per_unit=35.37).interpolate(200)
    assert level == pytest.approx(50.0)
    assert volume == pytest.approx(1768.5)


def test_default_liters_per_unit(calibration):
    _, volume = CalibrationInterpolator(calibration).interpolate(150)
    assert volume == pytest.approx(75.0 * 35.37)


def test_single_point_is_rejected():
    interpolator = CalibrationInterpolator({0: 300})
    with pytest.raises(OutOfCalibrationRange):
        interpolator.interpolate(300)


def test_empty_mapping_is_rejected():
    with pytest.raises(OutOfCalibrationRange):
        CalibrationInterpolator({}).interpolate(10)


@pytest.mark.parametrize('pixel', [99, 99.5, 301, 0, 1000])
def test_outside_calibrated_span(calibration, pixel):
    with pytest.raises(OutOfCalibrationRange) as exc_info:
        CalibrationInterpolator(calibration).interpolate(pixel)
    assert exc_info.value.pixel == pixel
    assert exc_info.value.span == (100, 300)


@pytest.mark.parametrize('pixel, expected', [(300, 0.0), (100, 100.0)])
def test_exact_calibration_point_at_span_edges(calibration, pixel, expected):
    level, _ = CalibrationInterpolator(calibration).interpolate(pixel)
    assert level == expected


def test_interior_calibration_point_uses_bracket():
    interpolator = CalibrationInterpolator({0: 300, 40: 200, 100: 100})
    assert interpolator.find_bracket(200) == ((100, 100), (0, 300))

    level, volume = interpolator.interpolate(200)
    assert level == pytest.approx(50.0)
    assert volume == pytest.approx(50 * 35.37)


def test_level_is_continuous_across_interior_calibration_point():
    interpolator = CalibrationInterpolator({0: 300, 40: 200, 100: 100})
    levels = [interpolator.interpolate(pixel)[0] for pixel in (199, 200, 201)]
    assert levels == pytest.approx([50.5, 50.0, 49.5])
    assert levels[0] > levels[1] > levels[2]


def test_bracket_follows_ascending_height_order():
    # before is the last point below the pixel, after the first above it,
    # walking the points by height rather than by distance
    interpolator = CalibrationInterpolator({100: 100, 0: 300, 40: 200})
    before, after = interpolator.find_bracket(250)
    assert before == (100, 100)
    assert after == (0, 300)

    level, _ = interpolator.interpolate(250)
    assert level == pytest.approx(25.0)


def test_unordered_mapping_gives_same_result():
    ordered = CalibrationInterpolator({0: 300, 50: 200, 100: 100})
    shuffled = CalibrationInterpolator({100: 100, 0: 300, 50: 200})
    assert ordered.interpolate(180) == shuffled.interpolate(180)


def test_interpolation_is_idempotent(calibration):
    interpolator = CalibrationInterpolator(calibration)
    assert interpolator.interpolate(137) == interpolator.interpolate(137)


def test_mapping_is_copied(calibration):
    interpolator = CalibrationInterpolator(calibration)
    calibration[200] = 0
    with pytest.raises(OutOfCalibrationRange):
        interpolator.interpolate(50)


def test_load_calibration_mapping(tmp_path):
    path = tmp_path / 'calibration.json'
    path.write_text('{"0": 300, "100": 100, "12.5": 250.5}')
    mapping = load_calibration_mapping(str(path))
    assert mapping == {0: 300, 100: 100, 12.5: 250.5}
    assert all(not isinstance(key, str) for key in mapping)
