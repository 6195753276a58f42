"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos de un recorrido (Step, respuestas sintéticas).
- El dominio no conoce HTTP concreto, CLI ni walkers: solo conceptos del problema.
"""
