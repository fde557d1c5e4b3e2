"""Docstring-driven config generator.

Scans extension sources for tagged comment lines such as

    -- %import XMonad.Prompt.Window
    -- %keybind , ((modMask x, xK_g), windowPromptGoto)

and splices their payloads under marker lines of the generated build
manifest and config source:

    -- % Extension-provided imports
    -- % Extension-provided key bindings

Everything outside the marker lines is left untouched.
"""
