"""Kubernetes building blocks: metadata, affinity, tolerations, pod DNS, label selectors and object references."""