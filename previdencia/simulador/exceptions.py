from typing import Optional


class ValidationError(ValueError):
    """Registro de entrada malformado; rejeitado antes de qualquer cálculo.

    `registro` identifica o registro ofensor (ex.: "periodos[2] (id=p3)").
    """

    def __init__(self, mensagem: str, registro: Optional[str] = None):
        self.registro = registro
        self.mensagem = mensagem
        texto = f"{registro}: {mensagem}" if registro else mensagem
        super().__init__(texto)
