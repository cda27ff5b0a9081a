"""Built-in Audit Scenarios"""

from .origin import OriginValidationScenario
from .injection import MessageInjectionScenario
from .signing import (
    SilentTransactionSigningScenario, TransactionManipulationScenario, TransactionValidationScenario
)
from .keys import PrivateKeyRequestScenario, RecoveryManipulationScenario
from .storage import StorageExposureScenario
from .client_secrets import ExposedSecretsScenario

__all__ = [
    "OriginValidationScenario", "MessageInjectionScenario",
    "SilentTransactionSigningScenario", "TransactionManipulationScenario",
    "TransactionValidationScenario", "PrivateKeyRequestScenario",
    "RecoveryManipulationScenario", "StorageExposureScenario", "ExposedSecretsScenario",
]
