"""
Inkwell Grammar Definitions.

This module contains the Lark grammars for the template syntax and for the
expression language used inside template tags.
"""

template_grammar = r"""
    start: _item*

    _item: text
         | comment
         | output
         | raw_output
         | silent
         | var_stmt
         | block
         | definition
         | include

    // --- Leaves ---
    text: TEXT
    comment: COMMENT
    output: OUTPUT
    raw_output: RAW_OUTPUT
    silent: SILENT
    var_stmt: VAR

    // --- Structure ---
    block: BLOCK_OPEN _item* BLOCK_CLOSE
    definition: DEF_OPEN _item* DEF_CLOSE
    include: INCLUDE
           | INCLUDE_OPEN _override* INCLUDE_CLOSE
    _override: definition | text | comment

    // Tags are lexed whole; their arguments are picked apart by the parser.
    TEXT: /(?:[^{]|\{(?![{%#]))+/
    COMMENT: /\{#[\s\S]*?#\}/
    RAW_OUTPUT: /\{\{![\s\S]*?\}\}/
    SILENT: /\{\{:[\s\S]*?\}\}/
    OUTPUT: /\{\{(?![!:])[\s\S]*?\}\}/
    VAR: /\{%\s*var\s+[A-Za-z_$][\w$]*\s*=[\s\S]*?%\}/
    BLOCK_OPEN: /\{%\s*block\s+[\w.-]+\s*%\}/
    BLOCK_CLOSE: /\{%\s*endblock(?:\s+[\w.-]+)?\s*%\}/
    DEF_OPEN: /\{%\s*def\s+[\w.-]+(?:\s+(?:override|append|prepend))?\s*%\}/
    DEF_CLOSE: /\{%\s*enddef(?:\s+[\w.-]+)?\s*%\}/
    INCLUDE_OPEN: /\{%\s*include\s+(?:"[^"]*"|'[^']*')\s+with\s*%\}/
    INCLUDE: /\{%\s*include\s+(?:"[^"]*"|'[^']*')\s*%\}/
    INCLUDE_CLOSE: /\{%\s*endinclude\s*%\}/
"""

expression_grammar = r"""
    ?start: expr

    ?expr: NAME "=" expr -> assign
         | pipe

    ?pipe: ternary
         | pipe "|" NAME filter_args -> filter
    filter_args: (":" ternary)*

    ?ternary: or_expr
            | or_expr "?" ternary ":" ternary -> conditional

    ?or_expr: and_expr
            | or_expr "||" and_expr -> or_

    ?and_expr: equality
             | and_expr "&&" equality -> and_

    ?equality: relation
             | equality "===" relation -> eq
             | equality "!==" relation -> ne
             | equality "==" relation -> eq
             | equality "!=" relation -> ne

    ?relation: sum
             | relation "<" sum -> lt
             | relation "<=" sum -> le
             | relation ">" sum -> gt
             | relation ">=" sum -> ge

    ?sum: product
        | sum "+" product -> add
        | sum "-" product -> sub

    ?product: unary
            | product "*" unary -> mul
            | product "/" unary -> div
            | product "%" unary -> mod

    ?unary: postfix
          | "!" unary -> not_
          | "-" unary -> neg
          | "+" unary -> pos

    ?postfix: atom
            | postfix "." NAME -> member
            | postfix "[" expr "]" -> index
            | postfix "(" [arguments] ")" -> call

    arguments: expr ("," expr)*

    ?atom: NUMBER -> number
         | STRING -> string
         | "true" -> true
         | "false" -> false
         | "null" -> null
         | "undefined" -> null
         | NAME -> var
         | "[" [arguments] "]" -> array
         | "{" [pairs] "}" -> object
         | "(" expr ")"

    pairs: pair ("," pair)*
    pair: (NAME | STRING) ":" expr

    NAME: /[A-Za-z_$][\w$]*/
    STRING: /"(?:[^"\\]|\\.)*"/ | /'(?:[^'\\]|\\.)*'/
    NUMBER: /(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?/

    %import common.WS
    %ignore WS
"""
