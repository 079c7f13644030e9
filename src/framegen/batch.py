"""Batch analysis of directories of images."""

import os
import json
from concurrent.futures import ProcessPoolExecutor, TimeoutError, as_completed
from dataclasses import dataclass, field, replace
from typing import List

from tqdm import tqdm

from .pipeline import FrameAnalyzer, AnalysisResult
from .utils import is_image_file, get_output_path, ensure_directory
from . import defaults


@dataclass
class BatchStats:
    """Statistics for batch analysis."""
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    cancelled: int = 0
    errors: List[str] = field(default_factory=list)


# Pipeline instance (one per worker process)
_analyzer = None


def init_worker(config):
    """
    Initialize worker process with its own pipeline.

    Runs once per worker process; the pipeline is reused for every image
    that worker handles.

    Args:
        config: Configuration dictionary with pipeline settings
    """
    global _analyzer
    _analyzer = FrameAnalyzer(max_size=config.get('max_size', defaults.ANALYSIS_MAX_SIZE))


def process_single_image(args):
    """
    Analyze a single image and write its JSON report.

    Args:
        args: Tuple of (input_path, output_path, config_dict)

    Returns:
        AnalysisResult (without the report, which stays on disk)
    """
    global _analyzer

    input_path, output_path, config = args

    if config.get('skip_existing') and os.path.exists(output_path):
        return AnalysisResult(success=True, input_path=input_path, skipped=True)

    if _analyzer is None:
        init_worker(config)

    result = _analyzer.analyze_file(input_path)

    if result.success:
        analysis_data = {
            'filename': os.path.basename(input_path),
            'warnings': result.warnings,
        }
        analysis_data.update(result.report.to_dict())
        with open(output_path, 'w') as f:
            json.dump(analysis_data, f, indent=2)

    # Reports can be large; the parent process only needs the outcome
    return replace(result, report=None)


def collect_images(input_dir: str) -> List[str]:
    """
    Recursively collect all image files from directory.

    Args:
        input_dir: Directory to scan

    Returns:
        List of image file paths
    """
    images = []
    for root, dirs, files in os.walk(input_dir):
        for file in files:
            file_path = os.path.join(root, file)
            if is_image_file(file_path):
                images.append(file_path)
    return sorted(images)


def run_batch(input_dir, output_dir, config, workers=defaults.WORKERS):
    """
    Run batch analysis on a directory of images.

    Each image is an independent unit of work in a process pool. When
    ``config['timeout']`` (seconds) is set and expires, images not yet
    finished are cancelled and counted as failed, and any report such an
    image writes after the deadline is removed.

    Args:
        input_dir: Input directory containing images
        output_dir: Output directory for JSON reports
        config: Configuration dictionary for worker processes
        workers: Number of parallel workers

    Returns:
        0 on success, 1 if any failures
    """
    if not os.path.isdir(input_dir):
        print(f"Error: Input directory does not exist: {input_dir}")
        return 1

    ensure_directory(output_dir)

    print("Scanning for images...")
    if config.get('recursive', False):
        images = collect_images(input_dir)
    else:
        images = sorted(
            os.path.join(input_dir, f)
            for f in os.listdir(input_dir)
            if is_image_file(os.path.join(input_dir, f))
        )

    if not images:
        print("No images found in input directory")
        return 0

    print(f"Found {len(images)} images")

    tasks = [
        (img, get_output_path(img, output_dir), config)
        for img in images
    ]

    stats = BatchStats(total=len(images))
    preexisting = {task[1] for task in tasks if os.path.exists(task[1])}
    handled = set()
    cancelled_outputs = []

    print(f"\nAnalyzing images (workers: {workers}, "
          f"analysis size: {config.get('max_size', defaults.ANALYSIS_MAX_SIZE)})...\n")

    with ProcessPoolExecutor(max_workers=workers, initializer=init_worker, initargs=(config,)) as executor:
        futures = {executor.submit(process_single_image, task): task for task in tasks}

        with tqdm(total=len(tasks), unit='img') as pbar:
            try:
                for future in as_completed(futures, timeout=config.get('timeout')):
                    input_path = futures[future][0]
                    handled.add(future)

                    try:
                        result = future.result()
                        if result.success:
                            if result.skipped:
                                stats.skipped += 1
                            else:
                                stats.success += 1
                        else:
                            stats.failed += 1
                            stats.errors.append(f"{input_path}: {result.error_message}")
                    except Exception as e:
                        stats.failed += 1
                        stats.errors.append(f"{input_path}: {str(e)}")

                    pbar.update(1)
            except TimeoutError:
                # Images still running finish in the background; their results
                # are dropped along with everything not yet started
                executor.shutdown(wait=False, cancel_futures=True)
                for future, task in futures.items():
                    if future not in handled:
                        future.cancel()
                        cancelled_outputs.append(task[1])
                        stats.cancelled += 1
                        stats.failed += 1
                        stats.errors.append(f"{task[0]}: cancelled (batch timeout)")

    # The pool has drained: remove reports that cancelled images wrote late
    for output_path in cancelled_outputs:
        if output_path not in preexisting and os.path.exists(output_path):
            os.remove(output_path)

    print("\n" + "=" * 60)
    print("BATCH ANALYSIS SUMMARY")
    print("=" * 60)
    print(f"Total images:     {stats.total}")
    print(f"Successful:       {stats.success}")
    if stats.skipped > 0:
        print(f"Skipped:          {stats.skipped}")
    if stats.cancelled > 0:
        print(f"Cancelled:        {stats.cancelled}")
    print(f"Failed:           {stats.failed}")

    if stats.errors:
        print("\nErrors:")
        for error in stats.errors[:10]:
            print(f"  - {error}")
        if len(stats.errors) > 10:
            print(f"  ... and {len(stats.errors) - 10} more")

    print(f"\nOutput directory: {output_dir}")
    print("=" * 60)

    return 0 if stats.failed == 0 else 1
