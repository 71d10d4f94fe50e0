import logging

import ply.lex as lex

logger = logging.getLogger(__name__)


class LexError(Exception):
    def __init__(self, message: str, line: int, col: int):
        super().__init__(f"LexError at {line}:{col} - {message}")
        self.message = message
        self.line = line
        self.col = col


class GoLexer:

    tokens = (
        # Keywords
        'BREAK', 'CASE', 'CHAN', 'CONST', 'CONTINUE', 'DEFAULT', 'DEFER',
        'ELSE', 'FALLTHROUGH', 'FOR', 'FUNC', 'GO', 'GOTO', 'IF', 'IMPORT',
        'INTERFACE', 'MAP', 'PACKAGE', 'RANGE', 'RETURN', 'SELECT',
        'STRUCT', 'SWITCH', 'TYPE', 'VAR',

        # Identifiers and literals
        'ID', 'INT', 'FLOAT', 'IMAG', 'CHAR', 'STRING',

        # Assignment operators
        'PLUS_EQ', 'MINUS_EQ', 'MULT_EQ', 'DIV_EQ', 'MOD_EQ',
        'AMP_EQ', 'PIPE_EQ', 'CARET_EQ', 'SHL_EQ', 'SHR_EQ', 'AND_NOT_EQ',
        'DEFINE', 'EQ',

        # Multi-character operators
        'AND', 'OR', 'ARROW', 'INC', 'DEC', 'EQ_EQ', 'NOT_EQ',
        'LESS_EQ', 'GREATER_EQ', 'SHL', 'SHR', 'AND_NOT', 'ELLIPSIS',

        # Single-character operators
        'PLUS', 'MINUS', 'MULT', 'DIV', 'MOD', 'AMP', 'PIPE', 'CARET',
        'LESS_THAN', 'GREATER_THAN', 'NOT', 'TILDE',

        # Parentheses and brackets
        'LPAREN', 'RPAREN',
        'LSQUAREBR', 'RSQUAREBR',
        'LCURLYEBR', 'RCURLYEBR',

        # Punctuation
        'SEMI_COLON', 'COMMA', 'DOT', 'COLON',

        # Line break, folded into SEMI_COLON or dropped by tokenize()
        'NEWLINE',
    )

    reserved = {
        'break': 'BREAK',
        'case': 'CASE',
        'chan': 'CHAN',
        'const': 'CONST',
        'continue': 'CONTINUE',
        'default': 'DEFAULT',
        'defer': 'DEFER',
        'else': 'ELSE',
        'fallthrough': 'FALLTHROUGH',
        'for': 'FOR',
        'func': 'FUNC',
        'go': 'GO',
        'goto': 'GOTO',
        'if': 'IF',
        'import': 'IMPORT',
        'interface': 'INTERFACE',
        'map': 'MAP',
        'package': 'PACKAGE',
        'range': 'RANGE',
        'return': 'RETURN',
        'select': 'SELECT',
        'struct': 'STRUCT',
        'switch': 'SWITCH',
        'type': 'TYPE',
        'var': 'VAR',
    }

    # A line ending after one of these gets an implicit semicolon
    semicolon_triggers = frozenset({
        'ID', 'INT', 'FLOAT', 'IMAG', 'CHAR', 'STRING',
        'BREAK', 'CONTINUE', 'FALLTHROUGH', 'RETURN',
        'INC', 'DEC', 'RPAREN', 'RSQUAREBR', 'RCURLYEBR',
    })

    # Ignored characters
    t_ignore = ' \t\r\ufeff'

    #  Longer regexes are tried first by ply
    t_AND_NOT_EQ = r'&\^='
    t_SHL_EQ = r'<<='
    t_SHR_EQ = r'>>='
    t_ELLIPSIS = r'\.\.\.'
    t_PLUS_EQ = r'\+='
    t_MINUS_EQ = r'-='
    t_MULT_EQ = r'\*='
    t_DIV_EQ = r'/='
    t_MOD_EQ = r'%='
    t_AMP_EQ = r'&='
    t_PIPE_EQ = r'\|='
    t_CARET_EQ = r'\^='
    t_DEFINE = r':='
    t_AND = r'&&'
    t_OR = r'\|\|'
    t_ARROW = r'<-'
    t_INC = r'\+\+'
    t_DEC = r'--'
    t_EQ_EQ = r'=='
    t_NOT_EQ = r'!='
    t_LESS_EQ = r'<='
    t_GREATER_EQ = r'>='
    t_SHL = r'<<'
    t_SHR = r'>>'
    t_AND_NOT = r'&\^'

    # Single-character operators
    t_PLUS = r'\+'
    t_MINUS = r'-'
    t_MULT = r'\*'
    t_DIV = r'/'
    t_MOD = r'%'
    t_AMP = r'&'
    t_PIPE = r'\|'
    t_CARET = r'\^'
    t_EQ = r'='
    t_LESS_THAN = r'<'
    t_GREATER_THAN = r'>'
    t_NOT = r'!'
    t_TILDE = r'~'

    # Parentheses and brackets
    t_LPAREN = r'\('
    t_RPAREN = r'\)'
    t_LSQUAREBR = r'\['
    t_RSQUAREBR = r'\]'
    t_LCURLYEBR = r'\{'
    t_RCURLYEBR = r'\}'

    # Punctuation
    t_SEMI_COLON = r';'
    t_COMMA = r','
    t_DOT = r'\.'
    t_COLON = r':'

    def __init__(self):
        self.lexer = None
        self.comments = []

    # Comments are kept aside for "// want" style annotations
    def t_LINE_COMMENT(self, t):
        r'//[^\n]*'
        self._record_comment(t)

    def t_BLOCK_COMMENT(self, t):
        r'/\*[\s\S]*?\*/'
        self._record_comment(t)
        newlines = t.value.count('\n')
        if newlines:
            t.lexer.lineno += newlines
            t.type = 'NEWLINE'
            return t

    # Raw strings may span lines
    def t_RAW_STRING(self, t):
        r'`[^`]*`'
        t.type = 'STRING'
        t.lexer.lineno += t.value.count('\n')
        return t

    def t_STRING(self, t):
        r'"(?:[^"\\\n]|\\.)*"'
        return t

    def t_CHAR(self, t):
        r"'(?:[^'\\\n]|\\.)+'"
        return t

    def t_IMAG(self, t):
        r'(?:\d[\d_]*(?:\.[\d_]*)?(?:[eE][+-]?\d+)?|\.\d[\d_]*(?:[eE][+-]?\d+)?)i'
        return t

    def t_FLOAT(self, t):
        r'(?:\d[\d_]*\.[\d_]*(?:[eE][+-]?\d+)?|\d[\d_]*[eE][+-]?\d+|\.\d[\d_]*(?:[eE][+-]?\d+)?)'
        return t

    def t_INT(self, t):
        r'0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|\d[\d_]*'
        return t

    # Identifiers (Go allows unicode letters)
    def t_ID(self, t):
        r'[^\W\d]\w*'
        t.type = self.reserved.get(t.value, 'ID')
        return t

    #  line number tracking
    def t_NEWLINE(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)
        return t

    # Error handling
    def t_error(self, t):
        line, col = self._position(t.lexer.lexdata, t.lexpos, t.lineno)
        raise LexError(f"Illegal character {t.value[0]!r}", line, col)

    def _record_comment(self, t):
        line, col = self._position(t.lexer.lexdata, t.lexpos, t.lineno)
        self.comments.append({'line': line, 'column': col, 'text': t.value})

    @staticmethod
    def _position(data, lexpos, lineno):
        line_start = data.rfind('\n', 0, lexpos) + 1
        return lineno, lexpos - line_start + 1

    def build(self, **kwargs):
        """Build the lexer"""
        self.lexer = lex.lex(module=self, **kwargs)
        return self.lexer

    def tokenize(self, data):
        if not self.lexer:
            self.build()

        self.lexer.input(data)
        self.lexer.lineno = 1
        self.comments = []
        tokens = []
        last_type = None

        while True:
            tok = self.lexer.token()
            if not tok:
                break

            line, column = self._position(data, tok.lexpos, tok.lineno)

            if tok.type == 'NEWLINE':
                if last_type in self.semicolon_triggers:
                    tokens.append({
                        'line': line,
                        'column': column,
                        'type': 'SEMI_COLON',
                        'value': '\n',
                        'lexpos': tok.lexpos
                    })
                    last_type = 'SEMI_COLON'
                continue

            tokens.append({
                'line': line,
                'column': column,
                'type': tok.type,
                'value': tok.value,
                'lexpos': tok.lexpos
            })
            last_type = tok.type

        if last_type in self.semicolon_triggers:
            line, column = self._position(data, len(data), self.lexer.lineno)
            tokens.append({
                'line': line,
                'column': column,
                'type': 'SEMI_COLON',
                'value': '\n',
                'lexpos': len(data)
            })

        logger.debug("tokenized %d tokens, %d comments", len(tokens), len(self.comments))
        return tokens


def print_tokens(tokens):
    if not tokens:
        print("No tokens found!")
        return

    print(f"{'Line':<6}| {'Column':<7}| {'Token':<20}| Value")
    print("-" * 118)

    for tok in tokens:
        value = str(tok['value'])
        # Limit length for display
        if len(value) > 50:
            value = value[:47] + "..."
        # Display escape characters
        value = repr(value)[1:-1] if '\n' in value or '\t' in value else value

        print(f"{tok['line']:<6}| {tok['column']:<7}| {tok['type']:<20}| {value}")
