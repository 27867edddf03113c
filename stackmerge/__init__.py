"""Load, import-resolve and deep-merge YAML stack configurations for Terraform and helmfile components."""

__version__ = "0.1.0"