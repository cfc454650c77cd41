"""Field schemas and expand/flatten converters for KubeVirt virtual machine configuration."""

__version__ = "0.1.0"