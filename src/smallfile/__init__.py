"""
smallfile: conversion of legacy HPO disease annotation ("small file") rows into the v2 format.
"""

from .assembler import ConversionContext, ConversionResult, RecordAssembler
from .batch import BatchReport, convert_rows, convert_table
from .config import ConversionSettings
from .errors import ConversionError, FatalInputError, RecoverableValidationError
from .model import CanonicalRecord, DiseaseDatabase, EvidenceCode, LegacyRow, Sex
from .modifier import ModifierIndex
from .ontology import HpoOntologyView, OntologyView
from .qc import QcCode, QcIssueTracker

__all__ = [
    "BatchReport",
    "CanonicalRecord",
    "ConversionContext",
    "ConversionError",
    "ConversionResult",
    "ConversionSettings",
    "DiseaseDatabase",
    "EvidenceCode",
    "FatalInputError",
    "HpoOntologyView",
    "LegacyRow",
    "ModifierIndex",
    "OntologyView",
    "QcCode",
    "QcIssueTracker",
    "RecordAssembler",
    "RecoverableValidationError",
    "Sex",
    "convert_rows",
    "convert_table",
]
