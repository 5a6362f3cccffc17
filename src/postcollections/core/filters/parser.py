"""Parser for filter expressions.

Grammar::

    expression  := conjunction ("," conjunction)*
    conjunction := group ("+" group)*
    group       := "(" expression ")" | predicate
    predicate   := IDENTIFIER ":" ["-"] (list | [operator] value)
    operator    := ">" | ">=" | "<" | "<=" | "~" | "~^" | "~$"
    list        := "[" value ("," value)* "]"
"""

from .ast import BinaryOp, ListLiteral, Literal, Negation, Node, TextMatch, TextMode, Variable
from .exceptions import FilterSyntaxError
from .lexer import Lexer, Token, TokenType

COMPARISON_OPERATORS = {
    TokenType.GT: ">",
    TokenType.GTE: ">=",
    TokenType.LT: "<",
    TokenType.LTE: "<=",
}

TEXT_MODES = {
    TokenType.CONTAINS: TextMode.CONTAINS,
    TokenType.STARTS_WITH: TextMode.STARTS_WITH,
    TokenType.ENDS_WITH: TextMode.ENDS_WITH,
}

VALUE_TOKENS = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.NULL,
    TokenType.IDENTIFIER,
)


class Parser:
    """Recursive descent parser for filter expressions."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current_token: Token = self.lexer.get_next_token()

    def error(self, message: str) -> None:
        """Raise a syntax error."""
        raise FilterSyntaxError(message, self.current_token.position)

    def consume(self, token_type: TokenType) -> None:
        """Consume the current token if it matches the expected type."""
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            self.error(f"Expected {token_type.name}, found {self.current_token.type.name}")

    def parse(self) -> Node:
        """Parse the entire expression."""
        if self.current_token.type == TokenType.EOF:
            self.error("Empty filter expression")
        node = self.expression()
        if self.current_token.type != TokenType.EOF:
            self.error("Unexpected token after expression")
        return node

    def expression(self) -> Node:
        """Parse OR-joined conjunctions."""
        node = self.conjunction()

        while self.current_token.type == TokenType.OR:
            self.consume(TokenType.OR)
            right = self.conjunction()
            node = BinaryOp(left=node, operator="or", right=right)

        return node

    def conjunction(self) -> Node:
        """Parse AND-joined groups."""
        node = self.group()

        while self.current_token.type == TokenType.AND:
            self.consume(TokenType.AND)
            right = self.group()
            node = BinaryOp(left=node, operator="and", right=right)

        return node

    def group(self) -> Node:
        """Parse a parenthesised expression or a single predicate."""
        if self.current_token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            node = self.expression()
            self.consume(TokenType.RPAREN)
            return node

        return self.predicate()

    def predicate(self) -> Node:
        """Parse a field:value predicate."""
        token = self.current_token
        if token.type != TokenType.IDENTIFIER:
            self.error(f"Expected field name, found {token.type.name}")

        field = Variable(str(token.value))
        self.consume(TokenType.IDENTIFIER)
        self.consume(TokenType.COLON)

        negated = False
        if self.current_token.type == TokenType.MINUS:
            self.consume(TokenType.MINUS)
            negated = True

        node: Node
        token_type = self.current_token.type
        if token_type == TokenType.LBRACKET:
            node = BinaryOp(left=field, operator="in", right=self._list())
        elif token_type in COMPARISON_OPERATORS:
            self.consume(token_type)
            node = BinaryOp(left=field, operator=COMPARISON_OPERATORS[token_type], right=self._value())
        elif token_type in TEXT_MODES:
            self.consume(token_type)
            node = TextMatch(field, TEXT_MODES[token_type], self._value())
        else:
            node = BinaryOp(left=field, operator="==", right=self._value())

        if negated:
            return Negation(node)
        return node

    def _list(self) -> ListLiteral:
        """Parse a bracketed value list."""
        self.consume(TokenType.LBRACKET)
        items: list[Literal] = [self._value()]

        # Inside brackets the OR token is a plain separator
        while self.current_token.type == TokenType.OR:
            self.consume(TokenType.OR)
            items.append(self._value())

        self.consume(TokenType.RBRACKET)
        return ListLiteral(tuple(items))

    def _value(self) -> Literal:
        """Parse a literal value; bare words are strings."""
        negative = False
        if self.current_token.type == TokenType.MINUS:
            self.consume(TokenType.MINUS)
            negative = True

        token = self.current_token
        if token.type not in VALUE_TOKENS:
            self.error(f"Expected value, found {token.type.name}")
        self.consume(token.type)

        if negative:
            if token.type not in (TokenType.INTEGER, TokenType.FLOAT):
                self.error("Only numbers can be negative")
            return Literal(-token.value)  # type: ignore[operator]

        return Literal(token.value)
