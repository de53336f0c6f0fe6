from cropdoc.diagnosis.normalizer import DiagnosisNormalizer
from cropdoc.diagnosis.schemas import VendorSchema, VendorSchemaFactory

__all__ = ["DiagnosisNormalizer", "VendorSchema", "VendorSchemaFactory"]
