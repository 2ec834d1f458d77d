"""
Pulumi modules for AWS AI/ML services: Textract adapters, Comprehend
classifiers and recognizers, Bedrock models, guardrails and knowledge
bases, Kendra indices and Rekognition collections, stream processors
and projects, together with their IAM service roles.
"""

from awsaiml.errors import DependencyFailure, InvalidReference, ModuleError, ValidationError
from awsaiml.modules import MODULES, plan_module
from awsaiml import bedrock, comprehend, kendra, rekognition, textract  # noqa: F401  registers the modules

__all__ = [
    "MODULES",
    "plan_module",
    "ModuleError",
    "ValidationError",
    "InvalidReference",
    "DependencyFailure",
]
