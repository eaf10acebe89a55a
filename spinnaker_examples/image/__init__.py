from .processing import ImageSaver, image_filename
from .lut import linear_lut
