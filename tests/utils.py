"""Shared helpers for the texbridge test suite."""

SAMPLE_DOCUMENT = r"""\documentclass{article}
\usepackage{amsmath}
\title{Field Notes}
\author{A. Author}
\date{\today}
\begin{document}

\section{Intro}

Hello \textbf{world} with $E=mc^2$.

\begin{itemize}
  \item First
  \item Second
\end{itemize}

\begin{table}[h]
\centering
\begin{tabular}{|c|c|}
\hline
A & B \\
\hline
1 & 2 \\
\hline
\end{tabular}
\caption{Values}
\end{table}

\begin{quote}
Quoted text.
\end{quote}

\end{document}
"""


def fake_typesetter(expression: str, display_mode: bool) -> str:
    """Deterministic stand-in for the MathML typesetter."""
    if display_mode:
        return f'<div class="math math-display">{expression}</div>'
    return f'<span class="math math-inline">{expression}</span>'
