from causelist.classification.base import BaseRecordClassifier
from causelist.classification.classifier import RecordClassifier
from causelist.classification.factory import ClassifierFactory
from causelist.classification.models import CaseCategory, Record

__all__ = [
    "BaseRecordClassifier",
    "CaseCategory",
    "ClassifierFactory",
    "Record",
    "RecordClassifier",
]
