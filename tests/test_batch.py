"""Tests for batch module."""

import dataclasses
import json
import os
import tempfile
import numpy as np
import pytest
from PIL import Image
from framegen import batch
from framegen.batch import BatchStats, collect_images, process_single_image, run_batch


@pytest.fixture(autouse=True)
def reset_worker_pipeline():
    """Each test starts without a cached worker pipeline."""
    batch._analyzer = None
    yield
    batch._analyzer = None


def make_images(directory, names):
    paths = []
    for i, name in enumerate(names):
        path = os.path.join(directory, name)
        Image.new('RGB', (64, 48), color=(40 * i, 120, 200)).save(path)
        paths.append(path)
    return paths


def test_batch_stats_defaults():
    """Test stats start empty with independent error lists."""
    first = BatchStats()
    second = BatchStats()
    first.errors.append('x')
    assert second.errors == []
    assert first.total == first.success == first.failed == first.cancelled == 0


def test_collect_images_recursive():
    """Test recursive collection ignores non-images."""
    with tempfile.TemporaryDirectory() as tmpdir:
        nested = os.path.join(tmpdir, 'nested')
        os.makedirs(nested)
        make_images(tmpdir, ['b.png'])
        make_images(nested, ['a.png'])
        with open(os.path.join(tmpdir, 'notes.txt'), 'w') as f:
            f.write('hello')

        images = collect_images(tmpdir)

        assert [os.path.basename(p) for p in images] == ['b.png', 'a.png']


def test_process_single_image_writes_report():
    """Test a unit of work writes its JSON report."""
    with tempfile.TemporaryDirectory() as tmpdir:
        [img_path] = make_images(tmpdir, ['photo.png'])
        output_path = os.path.join(tmpdir, 'photo_analysis.json')

        result = process_single_image((img_path, output_path, {'max_size': 32}))

        assert result.success is True
        assert result.report is None
        assert result.skipped is False
        with open(output_path) as f:
            data = json.load(f)
        assert data['filename'] == 'photo.png'
        assert data['dimensions'] == [32, 24]
        assert data['crop_suggestions']


def test_process_single_image_skip_existing():
    """Test existing reports are skipped."""
    with tempfile.TemporaryDirectory() as tmpdir:
        [img_path] = make_images(tmpdir, ['photo.png'])
        output_path = os.path.join(tmpdir, 'photo_analysis.json')
        with open(output_path, 'w') as f:
            f.write('{}')

        result = process_single_image((img_path, output_path, {'skip_existing': True}))

        assert result.success is True
        assert result.skipped is True
        assert result.error_message is None
        with open(output_path) as f:
            assert f.read() == '{}'


def test_process_single_image_failure():
    """Test a corrupt file is reported, not raised."""
    with tempfile.TemporaryDirectory() as tmpdir:
        img_path = os.path.join(tmpdir, 'broken.png')
        with open(img_path, 'w') as f:
            f.write('not an image')
        output_path = os.path.join(tmpdir, 'broken_analysis.json')

        result = process_single_image((img_path, output_path, {}))

        assert result.success is False
        assert not os.path.exists(output_path)


def test_run_batch(capsys):
    """Test a full batch run with one worker."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, 'in')
        output_dir = os.path.join(tmpdir, 'out')
        os.makedirs(input_dir)
        make_images(input_dir, ['one.png', 'two.jpg'])

        code = run_batch(input_dir, output_dir, {'max_size': 32}, workers=1)

        assert code == 0
        assert sorted(os.listdir(output_dir)) == ['one_analysis.json', 'two_analysis.json']
        captured = capsys.readouterr()
        assert 'Successful:       2' in captured.out


def test_run_batch_reports_failures(capsys):
    """Test a corrupt image makes the batch exit non-zero."""
    with tempfile.TemporaryDirectory() as tmpdir:
        make_images(tmpdir, ['good.png'])
        with open(os.path.join(tmpdir, 'bad.png'), 'w') as f:
            f.write('not an image')
        output_dir = os.path.join(tmpdir, 'out')

        code = run_batch(tmpdir, output_dir, {'max_size': 32}, workers=1)

        assert code == 1
        captured = capsys.readouterr()
        assert 'Failed:           1' in captured.out
        assert 'bad.png' in captured.out


def test_run_batch_missing_input():
    """Test a missing input directory fails fast."""
    assert run_batch('/nonexistent/dir', '/tmp/unused-out', {}) == 1


def test_run_batch_empty_directory():
    """Test an empty directory succeeds with nothing to do."""
    with tempfile.TemporaryDirectory() as tmpdir:
        assert run_batch(tmpdir, os.path.join(tmpdir, 'out'), {}) == 0


def count_reports(directory):
    return len([f for f in os.listdir(directory) if f.endswith('_analysis.json')])


def make_noise_images(directory, count, size=256):
    rng = np.random.default_rng(7)
    for i in range(count):
        array = rng.integers(0, 256, (size, size, 3), dtype=np.uint8)
        Image.fromarray(array).save(os.path.join(directory, f'noise_{i}.png'))


def test_run_batch_timeout_cancels_unfinished(capsys):
    """Test an expired time budget cancels every unfinished image."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, 'in')
        output_dir = os.path.join(tmpdir, 'out')
        os.makedirs(input_dir)
        make_noise_images(input_dir, 3)

        # A zero budget expires before any worker can finish
        code = run_batch(input_dir, output_dir, {'max_size': 256, 'timeout': 0}, workers=1)

        assert code == 1
        captured = capsys.readouterr()
        assert 'Successful:       0' in captured.out
        assert 'Cancelled:        3' in captured.out
        assert 'Failed:           3' in captured.out
        assert 'cancelled (batch timeout)' in captured.out
        # An image already running when the budget expired must not leave a report
        assert count_reports(output_dir) == 0


def test_run_batch_timeout_keeps_existing_reports(capsys):
    """Test cancellation never removes reports from earlier runs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, 'in')
        output_dir = os.path.join(tmpdir, 'out')
        os.makedirs(input_dir)
        os.makedirs(output_dir)
        make_noise_images(input_dir, 2)
        earlier = os.path.join(output_dir, 'noise_0_analysis.json')
        with open(earlier, 'w') as f:
            f.write('{}')

        code = run_batch(input_dir, output_dir, {'max_size': 256, 'timeout': 0}, workers=1)

        assert code == 1
        assert os.path.exists(earlier)
        assert count_reports(output_dir) == 1


def test_run_batch_generous_timeout(capsys):
    """Test a budget that does not expire changes nothing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, 'in')
        output_dir = os.path.join(tmpdir, 'out')
        os.makedirs(input_dir)
        make_images(input_dir, ['one.png', 'two.png'])

        code = run_batch(input_dir, output_dir, {'max_size': 32, 'timeout': 300}, workers=1)

        assert code == 0
        captured = capsys.readouterr()
        assert 'Cancelled:' not in captured.out
        assert count_reports(output_dir) == 2


def test_analysis_result_is_immutable():
    """Test results returned by workers cannot be modified in place."""
    with tempfile.TemporaryDirectory() as tmpdir:
        [img_path] = make_images(tmpdir, ['photo.png'])
        output_path = os.path.join(tmpdir, 'photo_analysis.json')

        result = process_single_image((img_path, output_path, {'max_size': 32}))

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.success = False
