"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el runner depende de abstracciones y los
  tests pueden sustituir el transporte.
"""
