class BaseCoreError(Exception):
    """Classe base para todas as exceções da Camada Core."""
    default_message = "Ocorreu um erro inesperado na loja."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDataError(BaseCoreError):
    """Erro levantado quando dados inválidos são fornecidos."""
    default_message = "The data provided is invalid."


# ===============================================
# ERROS DE VALIDAÇÃO DO PEDIDO
# ===============================================

class OrderValidationError(BaseCoreError):
    """Base dos erros de validação do pedido. Todos são recuperáveis pelo cliente."""
    pass


class ProductUnavailableError(OrderValidationError):
    """O produto do carrinho não existe mais no catálogo."""
    def __init__(self, product_name: str, message=None):
        self.product_name = product_name
        if message is None:
            message = f'Product "{product_name}" is no longer available.'
        super().__init__(message)


class VariantUnavailableError(OrderValidationError):
    """A variante escolhida foi removida do produto."""
    def __init__(self, product_name: str, variant_name: str, message=None):
        self.product_name = product_name
        self.variant_name = variant_name
        if message is None:
            message = f'Variant "{variant_name}" of "{product_name}" is no longer available.'
        super().__init__(message)


class InsufficientStockError(OrderValidationError):
    """Erro levantado quando a quantidade solicitada excede o estoque."""
    def __init__(self, product_name: str, available: int, requested: int,
                 variant_name=None, message=None):
        self.product_name = product_name
        self.variant_name = variant_name
        self.available = available
        self.requested = requested
        if message is None:
            label = f'"{product_name}" - {variant_name}' if variant_name else f'"{product_name}"'
            message = f"Insufficient stock for {label}. Available: {available}"
        super().__init__(message)


class EmptyCartError(BaseCoreError):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    default_message = "Your cart is empty."


# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class TransactionConflictError(BaseCoreError):
    """Outra transação alterou um produto lido. A operação inteira deve ser refeita."""
    default_message = "A product changed while the transaction was running."


class CommitConflictError(BaseCoreError):
    """As tentativas de commit se esgotaram por conflitos concorrentes."""
    default_message = "The catalog changed while placing your order. Please try again."


class PersistenceUnavailableError(BaseCoreError):
    """O banco de dados do catálogo não está acessível."""
    default_message = "Database connection not available"


class StorageCorruptError(BaseCoreError):
    """Conteúdo do armazenamento local não pôde ser interpretado."""
    default_message = "Stored data could not be parsed."


class ItemNotFoundError(BaseCoreError):
    """Erro levantado quando um item (genérico) não é encontrado."""
    default_message = "The requested item was not found."


class ProductNotFoundError(ItemNotFoundError):
    default_message = "The requested product was not found."


class OrderNotFoundError(ItemNotFoundError):
    default_message = "The requested order was not found."


class InvalidStatusTransitionError(BaseCoreError):
    """Erro levantado ao tentar uma transição de status não permitida."""
    def __init__(self, current, requested, message=None):
        self.current = current
        self.requested = requested
        if message is None:
            message = f'Cannot move an order from "{current.value}" to "{requested.value}".'
        super().__init__(message)


# ===============================================
# ERROS DE IDENTIDADE E ACESSO
# ===============================================

class AccessDeniedError(BaseCoreError):
    default_message = "You do not have permission to perform this operation."


class AuthProviderError(BaseCoreError):
    """Falha reportada pelo provedor de identidade, identificada por um código."""
    def __init__(self, code: str, message=None):
        self.code = code
        super().__init__(message or code)


class AuthFailureError(AuthProviderError):
    """Credenciais recusadas pelo provedor (e-mail ou senha inválidos)."""
    def __init__(self, code: str = 'invalid-credential', message=None):
        super().__init__(code, message or "Invalid email or password.")
