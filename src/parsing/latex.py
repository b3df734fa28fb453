r"""
LaTeX to readable Unicode rewriting for math segments.

Small screens cannot typeset math, so LaTeX source is flattened into a
plain-text approximation. Rules run in a fixed order because each one
works on the output of the previous ones:

  1. \frac{A}{B}        -> (A)/(B)
  2. \sqrt[N]{A}        -> N√(A)      (before plain \sqrt)
  3. \sqrt{A}           -> √(A)
  4. \left( / \right)   -> ( / )      (also \middle; sizing commands dropped)
  5. ^{A} / _{A}        -> ^(A) / _(A)
  6. \text{A}, \mathbf{A}, ... -> A
  7. remaining braces stripped
  8. Greek letters      -> glyphs     (whole command tokens only)
  9. operators/symbols  -> glyphs or plain words
 10. unknown \commands  -> deleted
 11. whitespace collapsed and trimmed

Groups do not nest: the first "}" closes a group. Anything the rules do
not recognise degrades to best-effort text; the rewrite never fails.
"""
import re

_FRAC_PATTERN = re.compile(r"\\[dt]?frac\{([^}]*)\}\{([^}]*)\}")
_SQRT_N_PATTERN = re.compile(r"\\sqrt\[([^\]]*)\]\{([^}]*)\}")
_SQRT_PATTERN = re.compile(r"\\sqrt\{([^}]*)\}")
# \left( -> "(", \left. -> "", \left\langle -> "\langle"
_SIZED_DELIMITER_PATTERN = re.compile(r"\\(?:left|right|middle)\s*(?:([()\[\]{}|])|\.|(?=\\))")
_SUPERSCRIPT_PATTERN = re.compile(r"\^\{([^}]*)\}")
_SUBSCRIPT_PATTERN = re.compile(r"_\{([^}]*)\}")
_TEXT_WRAPPER_PATTERN = re.compile(r"\\(?:text[a-z]*|math[a-z]+|operatorname)\{([^}]*)\}")
_BRACE_PATTERN = re.compile(r"\\?[{}]")
_UNKNOWN_COMMAND_PATTERN = re.compile(r"\\[a-zA-Z]+")
_HORIZONTAL_SPACE_PATTERN = re.compile(r"[ \t]+")

GREEK_LETTERS = [
    ("\\alpha", "α"), ("\\beta", "β"), ("\\gamma", "γ"), ("\\delta", "δ"),
    ("\\epsilon", "ε"), ("\\varepsilon", "ε"), ("\\zeta", "ζ"), ("\\eta", "η"),
    ("\\theta", "θ"), ("\\vartheta", "ϑ"), ("\\iota", "ι"), ("\\kappa", "κ"),
    ("\\lambda", "λ"), ("\\mu", "μ"), ("\\nu", "ν"), ("\\xi", "ξ"),
    ("\\pi", "π"), ("\\varpi", "ϖ"), ("\\rho", "ρ"), ("\\varrho", "ϱ"),
    ("\\sigma", "σ"), ("\\varsigma", "ς"), ("\\tau", "τ"), ("\\upsilon", "υ"),
    ("\\phi", "φ"), ("\\varphi", "φ"), ("\\chi", "χ"), ("\\psi", "ψ"),
    ("\\omega", "ω"),
    ("\\Gamma", "Γ"), ("\\Delta", "Δ"), ("\\Theta", "Θ"), ("\\Lambda", "Λ"),
    ("\\Xi", "Ξ"), ("\\Pi", "Π"), ("\\Sigma", "Σ"), ("\\Upsilon", "Υ"),
    ("\\Phi", "Φ"), ("\\Psi", "Ψ"), ("\\Omega", "Ω"),
]

OPERATOR_SYMBOLS = [
    # Line break
    ("\\\\", " "),
    # Arithmetic
    ("\\times", "×"), ("\\div", "÷"), ("\\pm", "±"), ("\\mp", "∓"),
    ("\\cdot", "·"), ("\\ast", "∗"), ("\\star", "⋆"), ("\\circ", "∘"),
    ("\\bullet", "•"),
    # Dots
    ("\\cdots", "⋯"), ("\\ldots", "…"), ("\\dots", "…"), ("\\vdots", "⋮"),
    ("\\ddots", "⋱"),
    # Relations
    ("\\leq", "≤"), ("\\le", "≤"), ("\\geq", "≥"), ("\\ge", "≥"),
    ("\\leqslant", "≤"), ("\\geqslant", "≥"),
    ("\\neq", "≠"), ("\\ne", "≠"), ("\\approx", "≈"), ("\\equiv", "≡"),
    ("\\sim", "∼"), ("\\simeq", "≃"), ("\\cong", "≅"), ("\\propto", "∝"),
    ("\\ll", "≪"), ("\\gg", "≫"), ("\\mid", "|"), ("\\perp", "⊥"),
    ("\\parallel", "∥"),
    # Calculus and big operators
    ("\\infty", "∞"), ("\\partial", "∂"), ("\\nabla", "∇"),
    ("\\sum", "Σ"), ("\\prod", "Π"), ("\\int", "∫"), ("\\iint", "∬"),
    ("\\oint", "∮"),
    # Logic and sets
    ("\\forall", "∀"), ("\\exists", "∃"), ("\\nexists", "∄"), ("\\neg", "¬"),
    ("\\land", "∧"), ("\\lor", "∨"), ("\\wedge", "∧"), ("\\vee", "∨"),
    ("\\in", "∈"), ("\\notin", "∉"), ("\\ni", "∋"),
    ("\\subset", "⊂"), ("\\supset", "⊃"), ("\\subseteq", "⊆"), ("\\supseteq", "⊇"),
    ("\\cup", "∪"), ("\\cap", "∩"), ("\\setminus", "∖"),
    ("\\emptyset", "∅"), ("\\varnothing", "∅"), ("\\top", "⊤"), ("\\bot", "⊥"),
    # Arrows
    ("\\rightarrow", "→"), ("\\leftarrow", "←"), ("\\Rightarrow", "⇒"),
    ("\\Leftarrow", "⇐"), ("\\leftrightarrow", "↔"), ("\\Leftrightarrow", "⟺"),
    ("\\to", "→"), ("\\gets", "←"), ("\\mapsto", "↦"), ("\\implies", "⟹"),
    ("\\iff", "⟺"), ("\\uparrow", "↑"), ("\\downarrow", "↓"),
    # Delimiters
    ("\\langle", "⟨"), ("\\rangle", "⟩"), ("\\lfloor", "⌊"), ("\\rfloor", "⌋"),
    ("\\lceil", "⌈"), ("\\rceil", "⌉"), ("\\|", "‖"),
    # Misc letters
    ("\\hbar", "ℏ"), ("\\ell", "ℓ"), ("\\aleph", "ℵ"), ("\\angle", "∠"),
    # Spacing
    ("\\,", " "), ("\\;", " "), ("\\:", " "), ("\\!", ""), ("\\ ", " "),
    ("\\quad", " "), ("\\qquad", " "),
    # Escaped characters
    ("\\%", "%"), ("\\&", "&"), ("\\#", "#"), ("\\_", "_"), ("\\$", "$"),
    # Function names
    ("\\ln", "ln"), ("\\log", "log"), ("\\exp", "exp"),
    ("\\sin", "sin"), ("\\cos", "cos"), ("\\tan", "tan"),
    ("\\sec", "sec"), ("\\csc", "csc"), ("\\cot", "cot"),
    ("\\arcsin", "arcsin"), ("\\arccos", "arccos"), ("\\arctan", "arctan"),
    ("\\sinh", "sinh"), ("\\cosh", "cosh"), ("\\tanh", "tanh"),
    ("\\lim", "lim"), ("\\max", "max"), ("\\min", "min"),
    ("\\sup", "sup"), ("\\inf", "inf"), ("\\det", "det"), ("\\dim", "dim"),
    ("\\ker", "ker"), ("\\gcd", "gcd"), ("\\deg", "deg"), ("\\arg", "arg"),
    ("\\Pr", "Pr"), ("\\mod", "mod"), ("\\bmod", "mod"), ("\\pmod", "mod"),
]

# Whole command tokens only: a letter command must not run into more
# letters, so "\lesssim" is never read as "\le" + "ssim". Longest
# first among alternatives starting at the same offset.
_SYMBOL_TABLE = dict(GREEK_LETTERS + OPERATOR_SYMBOLS)
_SYMBOL_PATTERN = re.compile("|".join(
    re.escape(command) + ("(?![a-zA-Z])" if command[1:].isalpha() else "")
    for command in sorted(_SYMBOL_TABLE, key=len, reverse=True)
))


def latex_to_unicode(latex: str) -> str:
    """
    Rewrite LaTeX math source into a readable Unicode approximation.
    
    Pure and total: unknown commands are dropped rather than raising,
    so e.g. ``\\vec{v}`` loses its arrow and ``\\hat x`` becomes ``x``.
    
    Args:
        latex: Math content without its $ delimiters.
    
    Returns:
        Display string.
    
    Example:
        >>> latex_to_unicode(r"\\frac{1}{2} + \\pi")
        '(1)/(2) + π'
    """
    if not latex:
        return ""
    
    text = _FRAC_PATTERN.sub(r"(\1)/(\2)", latex)
    text = _SQRT_N_PATTERN.sub(r"\1√(\2)", text)
    text = _SQRT_PATTERN.sub(r"√(\1)", text)
    text = _SIZED_DELIMITER_PATTERN.sub(r"\1", text)
    text = _SUPERSCRIPT_PATTERN.sub(r"^(\1)", text)
    text = _SUBSCRIPT_PATTERN.sub(r"_(\1)", text)
    text = _TEXT_WRAPPER_PATTERN.sub(r"\1", text)
    text = _BRACE_PATTERN.sub("", text)
    
    text = replace_symbols(text)
    
    # Must run after the tables or it would eat known commands
    text = _UNKNOWN_COMMAND_PATTERN.sub("", text)
    text = _HORIZONTAL_SPACE_PATTERN.sub(" ", text)
    return text.strip()


def replace_symbols(text: str) -> str:
    """Replace known Greek and operator commands in a single left-to-right pass."""
    return _SYMBOL_PATTERN.sub(lambda match: _SYMBOL_TABLE[match.group(0)], text)
