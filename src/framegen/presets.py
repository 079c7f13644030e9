"""Social media aspect-ratio presets for crops."""

from dataclasses import dataclass
from typing import Dict

from .errors import UnsupportedPreset
from .regions import Region


@dataclass(frozen=True)
class AspectPreset:
    """Target aspect expressed as width:height."""
    width: float
    height: float
    name: str

    @property
    def ratio(self) -> float:
        return self.width / self.height


PRESETS: Dict[str, Dict[str, AspectPreset]] = {
    'instagram': {
        'square': AspectPreset(1, 1, 'Instagram Square'),
        'portrait': AspectPreset(4, 5, 'Instagram Portrait'),
        'landscape': AspectPreset(1.91, 1, 'Instagram Landscape'),
        'story': AspectPreset(9, 16, 'Instagram Story'),
    },
    'facebook': {
        'post': AspectPreset(1.91, 1, 'Facebook Post'),
        'cover': AspectPreset(2.7, 1, 'Facebook Cover'),
        'profile': AspectPreset(1, 1, 'Facebook Profile'),
    },
    'twitter': {
        'post': AspectPreset(16, 9, 'Twitter Post'),
        'header': AspectPreset(3, 1, 'Twitter Header'),
        'profile': AspectPreset(1, 1, 'Twitter Profile'),
    },
    'linkedin': {
        'post': AspectPreset(1.91, 1, 'LinkedIn Post'),
        'cover': AspectPreset(4, 1, 'LinkedIn Cover'),
        'profile': AspectPreset(1, 1, 'LinkedIn Profile'),
    },
    'youtube': {
        'thumbnail': AspectPreset(16, 9, 'YouTube Thumbnail'),
        'banner': AspectPreset(6.2, 1, 'YouTube Banner'),
    },
}


def get_preset(platform: str, format: str) -> AspectPreset:
    """Look up a preset, raising UnsupportedPreset for unknown keys."""
    formats = PRESETS.get(platform)
    if formats is None:
        raise UnsupportedPreset(
            f"Unknown platform '{platform}' (available: {', '.join(sorted(PRESETS))})"
        )
    preset = formats.get(format)
    if preset is None:
        raise UnsupportedPreset(
            f"Unknown format '{format}' for {platform} "
            f"(available: {', '.join(sorted(formats))})"
        )
    return preset


def apply_preset(
    crop: Region,
    platform: str,
    format: str,
    image_width: int = 1,
    image_height: int = 1
) -> Region:
    """
    Reshape a crop to a preset aspect ratio about its center.

    A crop wider than the target keeps its width and gets a new height;
    otherwise it keeps its height and gets a new width. The result may
    extend past the image; clamping is left to the caller.

    Args:
        crop: Crop in normalized coordinates
        platform: Preset platform key (e.g. 'instagram')
        format: Preset format key (e.g. 'portrait')
        image_width, image_height: Image size, so the aspect is applied in
            pixels rather than in normalized units

    Returns:
        New Region with the preset's pixel aspect ratio
    """
    preset = get_preset(platform, format)

    pixel_width = crop.width * image_width
    pixel_height = crop.height * image_height
    target = preset.ratio

    if pixel_height > 0 and pixel_width / pixel_height > target:
        new_width = pixel_width
        new_height = pixel_width / target
    else:
        new_height = pixel_height
        new_width = pixel_height * target

    new_width /= image_width
    new_height /= image_height
    return Region(
        x=crop.x + (crop.width - new_width) / 2,
        y=crop.y + (crop.height - new_height) / 2,
        width=new_width,
        height=new_height,
        score=crop.score,
    )
