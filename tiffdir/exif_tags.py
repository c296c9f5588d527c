# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Directory types and tag names

Directory type identifiers and the tag-name tables used to label decoded
tags. Only names live here; turning values into descriptive strings is
left to formatting layers built on top of the decoded directories.

Copyright 2025 DNAi inc.
"""

from enum import Enum
from typing import Dict


class DirectoryType(str, Enum):
    """Logical directory types produced while walking a TIFF structure."""
    ERROR = "Error"
    IFD0 = "Exif IFD0"
    SUBIFD = "Exif SubIFD"
    IMAGE_SUBIFD = "Exif Image"
    THUMBNAIL = "Exif Thumbnail"
    GPS = "GPS"
    INTEROP = "Interoperability"
    SONY_MAKERNOTE = "Sony Makernote"
    SONY_ERICSSON_MAKERNOTE = "Sony Ericsson Makernote"
    NIKON_TYPE1_MAKERNOTE = "Nikon Type 1 Makernote"
    NIKON_TYPE2_MAKERNOTE = "Nikon Makernote"
    CANON_MAKERNOTE = "Canon Makernote"
    OLYMPUS_MAKERNOTE = "Olympus Makernote"
    FUJIFILM_MAKERNOTE = "Fujifilm Makernote"
    PANASONIC_MAKERNOTE = "Panasonic Makernote"
    PENTAX_MAKERNOTE = "Pentax Makernote"
    CASIO_MAKERNOTE = "Casio Makernote"
    KYOCERA_MAKERNOTE = "Kyocera/Contax Makernote"
    SIGMA_MAKERNOTE = "Sigma Makernote"
    LEICA_MAKERNOTE = "Leica Makernote"
    APPLE_MAKERNOTE = "Apple Makernote"
    RICOH_MAKERNOTE = "Ricoh Makernote"
    SAMSUNG_MAKERNOTE = "Samsung Makernote"

    @property
    def is_makernote(self) -> bool:
        return self.name.endswith('_MAKERNOTE')


# Tag ids with structural meaning for the IFD walker
TAG_SUBIFDS = 0x014A
TAG_EXIF_SUBIFD = 0x8769
TAG_GPS_INFO = 0x8825
TAG_INTEROP = 0xA005
TAG_MAKERNOTE = 0x927C
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_XMP = 0x02BC
TAG_THUMBNAIL_OFFSET = 0x0201
TAG_THUMBNAIL_LENGTH = 0x0202


# ============================================================
# IFD0 / SubIFD / thumbnail tags (shared Exif tag space)
# ============================================================
EXIF_TAG_NAMES: Dict[int, str] = {
    0x000B: "ProcessingSoftware",
    0x00FE: "SubfileType",
    0x00FF: "OldSubfileType",
    0x0100: "ImageWidth",
    0x0101: "ImageLength",
    0x0102: "BitsPerSample",
    0x0103: "Compression",
    0x0106: "PhotometricInterpretation",
    0x010A: "FillOrder",
    0x010D: "DocumentName",
    0x010E: "ImageDescription",
    0x010F: "Make",
    0x0110: "Model",
    0x0111: "StripOffsets",
    0x0112: "Orientation",
    0x0115: "SamplesPerPixel",
    0x0116: "RowsPerStrip",
    0x0117: "StripByteCounts",
    0x011A: "XResolution",
    0x011B: "YResolution",
    0x011C: "PlanarConfiguration",
    0x011D: "PageName",
    0x0128: "ResolutionUnit",
    0x0129: "PageNumber",
    0x012D: "TransferFunction",
    0x0131: "Software",
    0x0132: "DateTime",
    0x013B: "Artist",
    0x013C: "HostComputer",
    0x013D: "Predictor",
    0x013E: "WhitePoint",
    0x013F: "PrimaryChromaticities",
    0x0142: "TileWidth",
    0x0143: "TileLength",
    0x0144: "TileOffsets",
    0x0145: "TileByteCounts",
    0x014A: "SubIFDs",
    0x0152: "ExtraSamples",
    0x0153: "SampleFormat",
    0x015B: "JPEGTables",
    0x0200: "JPEGProc",
    0x0201: "JPEGInterchangeFormat",
    0x0202: "JPEGInterchangeFormatLength",
    0x0211: "YCbCrCoefficients",
    0x0212: "YCbCrSubSampling",
    0x0213: "YCbCrPositioning",
    0x0214: "ReferenceBlackWhite",
    0x02BC: "XMLPacket",
    0x4746: "Rating",
    0x4749: "RatingPercent",
    0x828D: "CFARepeatPatternDim",
    0x828E: "CFAPattern2",
    0x8298: "Copyright",
    0x829A: "ExposureTime",
    0x829D: "FNumber",
    0x83BB: "IPTC-NAA",
    0x8649: "PhotoshopSettings",
    0x8769: "ExifOffset",
    0x8773: "ICC_Profile",
    0x8822: "ExposureProgram",
    0x8824: "SpectralSensitivity",
    0x8825: "GPSInfo",
    0x8827: "ISOSpeedRatings",
    0x8828: "OECF",
    0x8830: "SensitivityType",
    0x8832: "RecommendedExposureIndex",
    0x9000: "ExifVersion",
    0x9003: "DateTimeOriginal",
    0x9004: "DateTimeDigitized",
    0x9010: "OffsetTime",
    0x9011: "OffsetTimeOriginal",
    0x9012: "OffsetTimeDigitized",
    0x9101: "ComponentsConfiguration",
    0x9102: "CompressedBitsPerPixel",
    0x9201: "ShutterSpeedValue",
    0x9202: "ApertureValue",
    0x9203: "BrightnessValue",
    0x9204: "ExposureBiasValue",
    0x9205: "MaxApertureValue",
    0x9206: "SubjectDistance",
    0x9207: "MeteringMode",
    0x9208: "LightSource",
    0x9209: "Flash",
    0x920A: "FocalLength",
    0x9214: "SubjectArea",
    0x927C: "MakerNote",
    0x9286: "UserComment",
    0x9290: "SubSecTime",
    0x9291: "SubSecTimeOriginal",
    0x9292: "SubSecTimeDigitized",
    0x9C9B: "XPTitle",
    0x9C9C: "XPComment",
    0x9C9D: "XPAuthor",
    0x9C9E: "XPKeywords",
    0x9C9F: "XPSubject",
    0xA000: "FlashPixVersion",
    0xA001: "ColorSpace",
    0xA002: "ExifImageWidth",
    0xA003: "ExifImageHeight",
    0xA004: "RelatedSoundFile",
    0xA005: "InteroperabilityOffset",
    0xA20B: "FlashEnergy",
    0xA20E: "FocalPlaneXResolution",
    0xA20F: "FocalPlaneYResolution",
    0xA210: "FocalPlaneResolutionUnit",
    0xA214: "SubjectLocation",
    0xA215: "ExposureIndex",
    0xA217: "SensingMethod",
    0xA300: "FileSource",
    0xA301: "SceneType",
    0xA302: "CFAPattern",
    0xA401: "CustomRendered",
    0xA402: "ExposureMode",
    0xA403: "WhiteBalance",
    0xA404: "DigitalZoomRatio",
    0xA405: "FocalLengthIn35mmFilm",
    0xA406: "SceneCaptureType",
    0xA407: "GainControl",
    0xA408: "Contrast",
    0xA409: "Saturation",
    0xA40A: "Sharpness",
    0xA40B: "DeviceSettingDescription",
    0xA40C: "SubjectDistanceRange",
    0xA420: "ImageUniqueID",
    0xA430: "CameraOwnerName",
    0xA431: "BodySerialNumber",
    0xA432: "LensSpecification",
    0xA433: "LensMake",
    0xA434: "LensModel",
    0xA435: "LensSerialNumber",
    0xA500: "Gamma",
    0xC612: "DNGVersion",
    0xC613: "DNGBackwardVersion",
    0xC614: "UniqueCameraModel",
    0xC621: "ColorMatrix1",
    0xC622: "ColorMatrix2",
    0xC62F: "CameraSerialNumber",
    0xC630: "DNGLensInfo",
    0xC634: "DNGPrivateData",
    0xC65A: "CalibrationIlluminant1",
    0xC65B: "CalibrationIlluminant2",
}

# ============================================================
# GPS IFD tags
# ============================================================
GPS_TAG_NAMES: Dict[int, str] = {
    0x0000: "GPSVersionID",
    0x0001: "GPSLatitudeRef",
    0x0002: "GPSLatitude",
    0x0003: "GPSLongitudeRef",
    0x0004: "GPSLongitude",
    0x0005: "GPSAltitudeRef",
    0x0006: "GPSAltitude",
    0x0007: "GPSTimeStamp",
    0x0008: "GPSSatellites",
    0x0009: "GPSStatus",
    0x000A: "GPSMeasureMode",
    0x000B: "GPSDOP",
    0x000C: "GPSSpeedRef",
    0x000D: "GPSSpeed",
    0x000E: "GPSTrackRef",
    0x000F: "GPSTrack",
    0x0010: "GPSImgDirectionRef",
    0x0011: "GPSImgDirection",
    0x0012: "GPSMapDatum",
    0x0013: "GPSDestLatitudeRef",
    0x0014: "GPSDestLatitude",
    0x0015: "GPSDestLongitudeRef",
    0x0016: "GPSDestLongitude",
    0x0017: "GPSDestBearingRef",
    0x0018: "GPSDestBearing",
    0x0019: "GPSDestDistanceRef",
    0x001A: "GPSDestDistance",
    0x001B: "GPSProcessingMethod",
    0x001C: "GPSAreaInformation",
    0x001D: "GPSDateStamp",
    0x001E: "GPSDifferential",
    0x001F: "GPSHPositioningError",
}

# ============================================================
# Interoperability IFD tags
# ============================================================
INTEROP_TAG_NAMES: Dict[int, str] = {
    0x0001: "InteropIndex",
    0x0002: "InteropVersion",
    0x1000: "RelatedImageFileFormat",
    0x1001: "RelatedImageWidth",
    0x1002: "RelatedImageHeight",
}

# ============================================================
# Sony maker note tags (type 1 layout)
# ============================================================
SONY_MAKERNOTE_TAG_NAMES: Dict[int, str] = {
    0x0102: "Image Quality",
    0x0104: "Flash Exposure Compensation",
    0x0105: "Teleconverter Model",
    0x0112: "White Balance Fine Tune Value",
    0x0114: "Camera Settings",
    0x0115: "White Balance",
    0x0116: "Extra Info",
    0x0E00: "Print Image Matching (PIM) Info",
    0x1000: "Multi Burst Mode",
    0x1001: "Multi Burst Image Width",
    0x1002: "Multi Burst Image Height",
    0x1003: "Panorama",
    0x2001: "Preview Image",
    0x2002: "Rating",
    0x2004: "Contrast",
    0x2005: "Saturation",
    0x2006: "Sharpness",
    0x2007: "Brightness",
    0x2008: "Long Exposure Noise Reduction",
    0x2009: "High ISO Noise Reduction",
    0x200A: "HDR",
    0x200B: "Multi Frame Noise Reduction",
    0x200E: "Picture Effect",
    0x200F: "Soft Skin Effect",
    0x2011: "Vignetting Correction",
    0x2012: "Lateral Chromatic Aberration",
    0x2013: "Distortion Correction",
    0x2014: "WB Shift Amber/Magenta",
    0x2016: "Auto Portrait Framing",
    0x201B: "Focus Mode",
    0x201E: "AF Point Selected",
    0x3000: "Shot Info",
    0xB000: "File Format",
    0xB001: "Sony Model ID",
    0xB020: "Color Mode Setting",
    0xB021: "Color Temperature",
    0xB022: "Color Compensation Filter",
    0xB023: "Scene Mode",
    0xB024: "Zone Matching",
    0xB025: "Dynamic Range Optimizer",
    0xB026: "Image Stabilisation",
    0xB027: "Lens ID",
    0xB028: "Minolta Makernote",
    0xB029: "Color Mode",
    0xB02A: "Lens Spec",
    0xB02B: "Full Image Size",
    0xB02C: "Preview Image Size",
    0xB040: "Macro",
    0xB041: "Exposure Mode",
    0xB042: "Focus Mode",
    0xB043: "AF Mode",
    0xB044: "AF Illuminator",
    0xB047: "Quality",
    0xB048: "Flash Level",
    0xB049: "Release Mode",
    0xB04A: "Sequence Number",
    0xB04B: "Anti Blur",
    0xB04E: "Long Exposure Noise Reduction",
    0xB04F: "Dynamic Range Optimizer",
    0xB052: "Intelligent Auto",
    0xB054: "White Balance 2",
}


TAG_NAMES_BY_DIRECTORY: Dict[DirectoryType, Dict[int, str]] = {
    DirectoryType.IFD0: EXIF_TAG_NAMES,
    DirectoryType.SUBIFD: EXIF_TAG_NAMES,
    DirectoryType.IMAGE_SUBIFD: EXIF_TAG_NAMES,
    DirectoryType.THUMBNAIL: EXIF_TAG_NAMES,
    DirectoryType.GPS: GPS_TAG_NAMES,
    DirectoryType.INTEROP: INTEROP_TAG_NAMES,
    DirectoryType.SONY_MAKERNOTE: SONY_MAKERNOTE_TAG_NAMES,
}


def get_tag_name(directory_type: DirectoryType, tag_id: int) -> str:
    """
    Look up the name of a tag within a directory type.

    Args:
        directory_type: Type of the directory holding the tag
        tag_id: Numeric tag id

    Returns:
        Tag name, or "Unknown tag (0x....)" when the id is not listed
    """
    names = TAG_NAMES_BY_DIRECTORY.get(directory_type, {})
    name = names.get(tag_id)
    if name is None:
        return f"Unknown tag (0x{tag_id:04x})"
    return name
