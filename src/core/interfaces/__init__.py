"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los walkers concretos.
- Permite invertir dependencias: el orquestador depende de abstracciones.
"""
