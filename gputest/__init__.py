"""gputest - Validation harness for device-accelerated image kernels.

Supplies reproducible synthetic inputs, enumerates compute devices and
their capabilities, allocates buffers with controllable layout (including
ROI views with padded rows) and judges whether two results agree.

## Usage

```python
from gputest import (
    Session, MatType, Depth, Size, all_types,
    random_mat, load_mat, assert_mat_near,
)

with Session() as session:
    for device in session.devices:
        for mat_type in all_types():
            src = random_mat(Size(128, 128), mat_type)
            d_src = load_mat(src, use_roi=True)
            assert_mat_near(src, d_src, 0.0)
```

## Configuration

Environment variables with the ``GPUTEST_`` prefix, see ``gputest.config``.
"""

from .config import Settings, settings
from .errors import (
    DeviceIndexError,
    ShapeMismatchError,
    ValueMismatchError,
    UnsupportedFeatureError,
    KeypointMismatchError,
)
from .mat_type import (
    Depth,
    MatType,
    Size,
    mat_type_of,
    types,
    all_types,
    ALL_DEPTHS,
    DEPTH_PAIRS,
)
from .devices import (
    FeatureSet,
    DeviceInfo,
    CudaBackend,
    StaticBackend,
    DeviceCatalog,
    support_feature,
)
from .sampling import (
    RandomSource,
    get_random_source,
    seed_random,
    random_int,
    random_double,
    random_size,
    random_scalar,
    random_mat,
)
from .buffers import (
    create_mat,
    load_mat,
    get_mat,
    row_stride,
    tight_row_size,
    locate_roi,
)
from .comparison import (
    Point,
    MatComparison,
    MinMaxLoc,
    compare_mats,
    assert_mat_near,
    check_similarity,
    assert_mat_similar,
    min_max_loc_gold,
    assert_scalar_near,
    assert_point_near,
    show_diff,
    save_diff_image,
)
from .keypoints import (
    KeyPoint,
    Match,
    keypoints_equal,
    assert_keypoints_equal,
    get_matched_points_count,
)
from .params import (
    NamedValue,
    named,
    use_roi,
    inverse,
    channels,
    WHOLE_SUBMAT,
    DIRECT_INVERSE,
    ALL_CHANNELS,
    IMAGE_CHANNELS,
    DIFFERENT_SIZES,
    CodeTag,
    CodeFamily,
    NormCode,
    Interpolation,
    BorderType,
    WarpFlags,
    ALL_BORDER_TYPES,
    ParamTuple,
    combine,
    param_id,
)
from .registry import CaseRegistry, CaseResult, RegisteredCase
from .image_io import read_image, read_image_type, dump_image
from .diagnostics import format_device, print_device_info
from .session import Session

__all__ = [
    # Config
    'Settings',
    'settings',
    # Errors
    'DeviceIndexError',
    'ShapeMismatchError',
    'ValueMismatchError',
    'UnsupportedFeatureError',
    'KeypointMismatchError',
    # Types
    'Depth',
    'MatType',
    'Size',
    'mat_type_of',
    'types',
    'all_types',
    'ALL_DEPTHS',
    'DEPTH_PAIRS',
    # Devices
    'FeatureSet',
    'DeviceInfo',
    'CudaBackend',
    'StaticBackend',
    'DeviceCatalog',
    'support_feature',
    # Sampling
    'RandomSource',
    'get_random_source',
    'seed_random',
    'random_int',
    'random_double',
    'random_size',
    'random_scalar',
    'random_mat',
    # Buffers
    'create_mat',
    'load_mat',
    'get_mat',
    'row_stride',
    'tight_row_size',
    'locate_roi',
    # Comparison
    'Point',
    'MatComparison',
    'MinMaxLoc',
    'compare_mats',
    'assert_mat_near',
    'check_similarity',
    'assert_mat_similar',
    'min_max_loc_gold',
    'assert_scalar_near',
    'assert_point_near',
    'show_diff',
    'save_diff_image',
    # Keypoints
    'KeyPoint',
    'Match',
    'keypoints_equal',
    'assert_keypoints_equal',
    'get_matched_points_count',
    # Parameters
    'NamedValue',
    'named',
    'use_roi',
    'inverse',
    'channels',
    'WHOLE_SUBMAT',
    'DIRECT_INVERSE',
    'ALL_CHANNELS',
    'IMAGE_CHANNELS',
    'DIFFERENT_SIZES',
    'CodeTag',
    'CodeFamily',
    'NormCode',
    'Interpolation',
    'BorderType',
    'WarpFlags',
    'ALL_BORDER_TYPES',
    'ParamTuple',
    'combine',
    'param_id',
    # Registry
    'CaseRegistry',
    'CaseResult',
    'RegisteredCase',
    # Image I/O
    'read_image',
    'read_image_type',
    'dump_image',
    # Diagnostics
    'format_device',
    'print_device_info',
    # Session
    'Session',
]

__version__ = "0.1.0"
