# app/services/masking.py

def mask_name(name: str) -> str:
    """Mascara cada parte do nome: "Rupesh Kumar" -> "R****h K****r".

    Partes com até 2 caracteres ficam como estão. O split é no espaço simples,
    então espaços repetidos viram partes vazias e são preservados no join.
    """
    return " ".join(
        part[0] + "*" * (len(part) - 2) + part[-1] if len(part) > 2 else part
        for part in name.split(" ")
    )
