"""
Directory-tree compilation: scanning, configuration merging and the
breadth-first resource graph builder.
"""

from crow_api.tree.config_merger import ConfigMerger, EffectiveConfiguration, FunctionDefaults
from crow_api.tree.directory_scanner import DirectoryScanner
from crow_api.tree.graph_builder import (
    BuildResult,
    ConfigurationSources,
    PathGraphNode,
    ResourceGraphBuilder,
    VERBS,
)
from crow_api.tree.registry import Registry

__all__ = [
    'BuildResult',
    'ConfigMerger',
    'ConfigurationSources',
    'DirectoryScanner',
    'EffectiveConfiguration',
    'FunctionDefaults',
    'PathGraphNode',
    'Registry',
    'ResourceGraphBuilder',
    'VERBS',
]
