"""
Política de selección de bases de datos (función pura)
"""
from typing import List, Sequence
from ..config import Config


def select_databases(server_databases: Sequence[str], exports: Sequence[str],
                     forgets: Sequence[str]) -> List[str]:
    """
    Decide qué bases respaldar.

    Con el comodín en exports se devuelven todas las bases del servidor que
    no estén en forgets, en el orden del servidor. Sin comodín se devuelven
    las bases de exports que existen en el servidor, en el orden de exports,
    y forgets no se consulta. Comparación exacta y sensible a mayúsculas.

    Args:
        server_databases: Bases reportadas por el servidor
        exports: Bases a exportar o comodín
        forgets: Bases ignoradas en modo comodín

    Returns:
        Lista ordenada y sin duplicados
    """
    if Config.WILDCARD in exports:
        excluded = set(forgets)
        candidates = [db for db in server_databases if db not in excluded]
    else:
        available = set(server_databases)
        candidates = [db for db in exports if db in available]

    selected = []
    seen = set()
    for db in candidates:
        if db not in seen:
            seen.add(db)
            selected.append(db)
    return selected
