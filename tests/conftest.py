import os

import pytest


def render_dump(samples):
    """Render brightness samples in ImageMagick's txt: format."""
    lines = [f"# ImageMagick pixel enumeration: 1,{len(samples)},255,gray"]
    for row, value in enumerate(samples):
        lines.append(f"0,{row}: ({value:3d},{value:3d},{value:3d})  #{value:02X}{value:02X}{value:02X}  gray({value},{value},{value})")
    return '\n'.join(lines) + '\n'


def build_surface_profile(surface_row, length=260):
    """Dark background, bright scatter, noise, then a black surface line."""
    samples = [5] * 10 + [150] * 10 + [30] * (surface_row - 20)
    samples += [0] * 5
    samples += [40] * (length - len(samples))
    return samples


@pytest.fixture
def make_dump():
    return render_dump


@pytest.fixture
def surface_profile():
    return build_surface_profile


@pytest.fixture
def calibration():
    return {0: 300, 100: 100}


@pytest.fixture
def mapping_file(tmp_path):
    path = tmp_path / 'calibration.json'
    path.write_text('{"0": 300, "100": 100}')
    return str(path)


@pytest.fixture
def fake_preprocess():
    """Stand-in for ImageMagick that writes a dump with the surface at row 200."""
    calls = []

    def _preprocess(image_path, output_txt, config):
        calls.append((image_path, output_txt))
        with open(output_txt, 'w') as f:
            f.write(render_dump(build_surface_profile(200)))
        assert os.path.exists(image_path)
        return output_txt

    _preprocess.calls = calls
    return _preprocess
