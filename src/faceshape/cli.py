from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from faceshape.analysis.face_shape import FaceMeasurements, classify
from faceshape.config import DEFAULT_INTERVAL_MS, DetectorConfig, LiveConfig, OverlayStyle
from faceshape.io.video_reader import iter_frames, load_image_rgb, open_camera, probe_video
from faceshape.landmarks.mediapipe_face_landmarker import MediaPipeLandmarkProvider
from faceshape.landmarks.provider_base import LandmarkProvider
from faceshape.pipeline import FaceShapeResult, analyze_frame
from faceshape.runtime_paths import get_model_path
from faceshape.stream.session import LiveSession
from faceshape.viz.overlay import display_label

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="faceshape CLI: classify face shapes from landmarks, images, video, or a live camera.",
)
video_app = typer.Typer(help="Video file utilities.")
app.add_typer(video_app, name="video")
console = Console()
logger = logging.getLogger("faceshape")

# Builds the landmark provider for the image, live and video commands.
provider_factory: Callable[..., LandmarkProvider] = MediaPipeLandmarkProvider


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _measurements_table(title: str, results: Sequence[FaceShapeResult]) -> Table:
    table = Table(title=title)
    table.add_column("face")
    table.add_column("forehead", justify="right")
    table.add_column("cheekbone", justify="right")
    table.add_column("jaw (center)", justify="right")
    table.add_column("label")
    for result in results:
        m = result.measurements
        table.add_row(
            str(result.face_index),
            f"{m.forehead_width:.2f}",
            f"{m.cheekbone_width:.2f}",
            f"{m.jawline_length_from_center:.2f}",
            display_label(result.label),
        )
    return table


def _detector_config(model: Path, num_faces: int, use_gpu: bool) -> DetectorConfig:
    try:
        return DetectorConfig(model_path=model, num_faces=num_faces, use_gpu_delegate=use_gpu)
    except ValidationError as exc:
        message = exc.errors()[0].get("msg", "Invalid input")
        raise typer.BadParameter(message, param_hint="--model") from exc


def _open_provider(config: DetectorConfig, *, video_mode: bool) -> LandmarkProvider:
    try:
        return provider_factory(
            model_path=config.model_path,
            num_faces=config.num_faces,
            video_mode=video_mode,
            use_gpu_delegate=config.use_gpu_delegate,
        )
    except FileNotFoundError as exc:
        console.print(str(exc))
        raise typer.Exit(code=2) from exc
    except ImportError as exc:
        raise typer.BadParameter(str(exc), param_hint="mediapipe") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--num-faces") from exc


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable debug logging.",
    ),
) -> None:
    _configure_logging(verbose)


@app.command("classify")
def classify_command(
    forehead: float = typer.Option(..., "--forehead", help="Forehead width in pixels."),
    cheekbone: float = typer.Option(..., "--cheekbone", help="Cheekbone width in pixels."),
    jaw: float = typer.Option(
        ...,
        "--jaw",
        help="Jawline length from the center, in pixels.",
    ),
) -> None:
    measurements = FaceMeasurements(
        forehead_width=forehead,
        cheekbone_width=cheekbone,
        jawline_length_from_center=jaw,
    )
    label = classify(measurements)

    table = Table(title="Measurements")
    table.add_column("name")
    table.add_column("value", justify="right")
    for name, value in measurements.as_dict().items():
        table.add_row(name, f"{value:g}")
    console.print(table)
    console.print(f"Face Shape: {display_label(label)}")


@app.command("image")
def image_command(
    image: Path = typer.Option(
        ...,
        "--image",
        "-i",
        help="Input image path.",
    ),
    model: Path = typer.Option(
        get_model_path(),
        "--model",
        help="MediaPipe Face Landmarker .task model path.",
    ),
    num_faces: int = typer.Option(
        1,
        "--num-faces",
        min=1,
        help="Maximum number of faces to classify.",
    ),
    use_gpu: bool = typer.Option(
        False,
        "--use-gpu/--no-use-gpu",
        help="Use GPU delegate when supported. Defaults to CPU.",
    ),
) -> None:
    try:
        image_rgb = load_image_rgb(image)
    except (FileNotFoundError, RuntimeError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--image") from exc

    detector = _detector_config(model, num_faces, use_gpu)
    with _open_provider(detector, video_mode=False) as provider:
        results = analyze_frame(image_rgb, provider)

    if not results:
        console.print(f"No face detected in {image}")
        return
    console.print(_measurements_table(f"Face shape: {image.name}", results))


@app.command("live")
def live_command(
    camera: int = typer.Option(
        0,
        "--camera",
        "-c",
        min=0,
        help="OpenCV camera index.",
    ),
    interval_ms: int = typer.Option(
        DEFAULT_INTERVAL_MS,
        "--interval-ms",
        min=1,
        help="Minimum delay between two analyzed frames.",
    ),
    model: Path = typer.Option(
        get_model_path(),
        "--model",
        help="MediaPipe Face Landmarker .task model path.",
    ),
    num_faces: int = typer.Option(
        1,
        "--num-faces",
        min=1,
        help="Maximum number of faces to classify per frame.",
    ),
    landmarks: bool = typer.Option(
        True,
        "--landmarks/--no-landmarks",
        help="Draw landmark dots on the overlay.",
    ),
    max_frames: Optional[int] = typer.Option(
        None,
        "--max-frames",
        min=1,
        help="Stop after reading this many frames.",
    ),
    window: bool = typer.Option(
        True,
        "--window/--no-window",
        help="Show the overlay window. Press q or Esc to quit.",
    ),
    use_gpu: bool = typer.Option(
        False,
        "--use-gpu/--no-use-gpu",
        help="Use GPU delegate when supported. Defaults to CPU.",
    ),
) -> None:
    try:
        config = LiveConfig(
            camera_index=camera,
            interval_ms=interval_ms,
            max_frames=max_frames,
            show_window=window,
            detector=DetectorConfig(
                model_path=model,
                num_faces=num_faces,
                use_gpu_delegate=use_gpu,
            ),
            style=OverlayStyle(draw_landmarks=landmarks),
        )
    except ValidationError as exc:
        message = exc.errors()[0].get("msg", "Invalid input")
        raise typer.BadParameter(message) from exc

    provider = _open_provider(config.detector, video_mode=True)
    try:
        capture = open_camera(config.camera_index)
    except (RuntimeError, ValueError) as exc:
        provider.close()
        raise typer.BadParameter(str(exc), param_hint="--camera") from exc

    console.print_json(data=config.as_summary())
    session = LiveSession(config, provider, capture, owns_provider=True)
    try:
        ticks = session.run()
    except (RuntimeError, ValueError) as exc:
        console.print(f"Live session failed after {session.frames_read} frames: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"Analyzed {ticks} frames out of {session.frames_read} read.")


@video_app.command("info")
def video_info(
    video: Path = typer.Option(
        ...,
        "--video",
        "-v",
        help="Input video path.",
    ),
) -> None:
    try:
        info = probe_video(video)
    except (FileNotFoundError, RuntimeError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--video") from exc

    console.print_json(
        data={
            "path": str(info.path),
            "fps": info.fps,
            "frame_count": info.frame_count,
            "width": info.width,
            "height": info.height,
            "duration_ms": info.duration_ms,
        }
    )


@video_app.command("classify")
def video_classify(
    video: Path = typer.Option(
        ...,
        "--video",
        "-v",
        help="Input video path.",
    ),
    model: Path = typer.Option(
        get_model_path(),
        "--model",
        help="MediaPipe Face Landmarker .task model path.",
    ),
    stride: int = typer.Option(
        1,
        "--stride",
        min=1,
        help="Classify one frame every N frames.",
    ),
    max_frames: Optional[int] = typer.Option(
        None,
        "--max-frames",
        min=1,
        help="Stop after classifying this many frames.",
    ),
    num_faces: int = typer.Option(
        1,
        "--num-faces",
        min=1,
        help="Maximum number of faces to classify per frame.",
    ),
    use_gpu: bool = typer.Option(
        False,
        "--use-gpu/--no-use-gpu",
        help="Use GPU delegate when supported. Defaults to CPU.",
    ),
) -> None:
    try:
        probe_video(video)
    except (FileNotFoundError, RuntimeError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--video") from exc

    detector = _detector_config(model, num_faces, use_gpu)
    table = Table(title=f"Face shape per frame: {video.name}")
    table.add_column("frame", justify="right")
    table.add_column("time (ms)", justify="right")
    table.add_column("face")
    table.add_column("label")

    classified = 0
    with _open_provider(detector, video_mode=True) as provider:
        for frame in iter_frames(video, stride=stride, max_frames=max_frames):
            results = analyze_frame(frame.image_rgb, provider, timestamp_ms=frame.timestamp_ms)
            classified += 1
            if not results:
                table.add_row(str(frame.idx), str(frame.timestamp_ms), "-", "(no face)")
                continue
            for result in results:
                table.add_row(
                    str(frame.idx),
                    str(frame.timestamp_ms),
                    str(result.face_index),
                    display_label(result.label),
                )

    console.print(table)
    logger.info("Classified %d frames from %s", classified, video)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
