from .compiler import MoeCompiler

__all__ = ['MoeCompiler']
