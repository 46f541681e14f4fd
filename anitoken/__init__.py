"""
Anime filename parser package.

This package contains the core processing modules:
- pre_tokenizer: File extension and ignored string removal
- tokenizer: Bracket-aware tokenization with delimiter repair
- token: Token model and directional token search
- keyword_manager: Keyword dictionary lookup and peek phrases
- parser: Keyword, title, release group and episode title passes
- parser_number: Episode and volume number resolution
- options: Parser options and layered configuration
- excel_writer: Excel reports of parsed filenames
"""

# Explicit imports make the public API clear and prevent namespace pollution
from .element import Element, ElementCategory, Elements
from .token import SearchResult, Token, TokenCategory, TokenFlag, TokenRange
from .options import Options, load_options
from .dictionary_loader import DictionaryLoader
from .keyword_manager import Keyword, KeywordManager, KeywordOptions, get_keyword_manager
from .pre_tokenizer import PreTokenizer, PreTokenizationResult, RemovedToken
from .tokenizer import Tokenizer, TokenizationResult
from .parser import Parser

__all__ = [
    'Element',
    'ElementCategory',
    'Elements',
    'SearchResult',
    'Token',
    'TokenCategory',
    'TokenFlag',
    'TokenRange',
    'Options',
    'load_options',
    'DictionaryLoader',
    'Keyword',
    'KeywordManager',
    'KeywordOptions',
    'get_keyword_manager',
    'PreTokenizer',
    'PreTokenizationResult',
    'RemovedToken',
    'Tokenizer',
    'TokenizationResult',
    'Parser',
]
