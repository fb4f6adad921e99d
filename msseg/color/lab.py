"""
Lab feature encoding for mean shift.

OpenCV stores 8-bit Lab as L in [0, 255] and a, b offset by 128. Mean shift
works in the natural Lab ranges instead (L in [0, 100], a and b centered on
0) so that Euclidean color distance is comparable to the color radius.
"""

import numpy as np
import cv2


L_SCALE = 100.0 / 255.0
AB_OFFSET = 128.0


def _check_image(image: np.ndarray, name: str):
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"{name} must be (H, W, 3), got shape {image.shape}")


def _to_uint8(image: np.ndarray, name: str) -> np.ndarray:
    """
    Bring an RGB/BGR image to contiguous uint8.

    uint8 passes through, other integer types must already lie in [0, 255]
    and floating point images must lie in [0, 1] (they are scaled by 255).

    Raises:
        ValueError: For values outside those ranges or unsupported dtypes
    """
    image = np.asarray(image)
    if image.dtype == np.uint8:
        return np.ascontiguousarray(image)

    if np.issubdtype(image.dtype, np.integer):
        if image.min() < 0 or image.max() > 255:
            raise ValueError(
                f"{name} with dtype {image.dtype} must lie in [0, 255], "
                f"got [{image.min()}, {image.max()}]"
            )
        return np.ascontiguousarray(image, dtype=np.uint8)

    if np.issubdtype(image.dtype, np.floating):
        if not np.all(np.isfinite(image)) or image.min() < 0 or image.max() > 1:
            raise ValueError(
                f"{name} with dtype {image.dtype} must hold finite values in [0, 1]"
            )
        return np.ascontiguousarray(np.round(image * 255.0), dtype=np.uint8)

    raise ValueError(f"{name} has unsupported dtype {image.dtype}")


def _opencv_lab_to_features(lab8: np.ndarray) -> np.ndarray:
    features = lab8.astype(np.float32)
    features[:, :, 0] *= L_SCALE
    features[:, :, 1:] -= AB_OFFSET
    return features


def _features_to_opencv_lab(features: np.ndarray) -> np.ndarray:
    features = np.asarray(features, dtype=np.float64)
    scaled = np.empty_like(features)
    scaled[:, :, 0] = features[:, :, 0] / L_SCALE
    scaled[:, :, 1:] = features[:, :, 1:] + AB_OFFSET
    # Truncate toward zero, then saturate to the 8-bit range
    return np.clip(np.trunc(scaled), 0, 255).astype(np.uint8)


def rgb_to_lab_features(image: np.ndarray) -> np.ndarray:
    """
    Convert an 8-bit RGB image to Lab features.

    Args:
        image: RGB image (H, W, 3), uint8 [0-255] or float [0, 1]

    Returns:
        features: float32 (H, W, 3) with L in [0, 100], a and b in [-128, 127]

    Raises:
        ValueError: If image is not (H, W, 3) or its values are out of range
    """
    _check_image(image, "RGB image")
    if image.size == 0:
        return np.zeros(image.shape, dtype=np.float32)
    lab8 = cv2.cvtColor(_to_uint8(image, "RGB image"), cv2.COLOR_RGB2Lab)
    return _opencv_lab_to_features(lab8)


def lab_features_to_rgb(features: np.ndarray) -> np.ndarray:
    """
    Convert Lab features back to an 8-bit RGB image.

    Args:
        features: Lab values (H, W, 3) in the ranges produced by rgb_to_lab_features

    Returns:
        image: RGB uint8 (H, W, 3)
    """
    _check_image(features, "Lab features")
    if features.size == 0:
        return np.zeros(features.shape, dtype=np.uint8)
    return cv2.cvtColor(_features_to_opencv_lab(features), cv2.COLOR_Lab2RGB)


def bgr_to_lab_features(image: np.ndarray) -> np.ndarray:
    """Same as rgb_to_lab_features for images decoded by cv2.imread (BGR order)."""
    _check_image(image, "BGR image")
    if image.size == 0:
        return np.zeros(image.shape, dtype=np.float32)
    lab8 = cv2.cvtColor(_to_uint8(image, "BGR image"), cv2.COLOR_BGR2Lab)
    return _opencv_lab_to_features(lab8)


def lab_features_to_bgr(features: np.ndarray) -> np.ndarray:
    """Same as lab_features_to_rgb but returns BGR order for cv2.imwrite."""
    _check_image(features, "Lab features")
    if features.size == 0:
        return np.zeros(features.shape, dtype=np.uint8)
    return cv2.cvtColor(_features_to_opencv_lab(features), cv2.COLOR_Lab2BGR)
