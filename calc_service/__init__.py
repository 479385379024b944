"""Calculator microservice with validated inputs and a circuit breaker."""

__version__ = "1.0.0"
