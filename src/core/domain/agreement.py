"""
FlowAgreement — Constant-Flow-Agreement между двумя аккаунтами

Одна запись на упорядоченную пару (sender, receiver), ключ — flow_id.
Нулевая ставка — валидное терминальное состояние: запись не удаляется.
"""

from pydantic import BaseModel, Field


class FlowAgreement(BaseModel):
    """
    Постоянный поток value от sender к receiver.

    Mutable модель: flow_rate и updated_at меняются при updateFlow.
    """

    flow_id: str = Field(..., min_length=1, description="Ключ потока (sender|receiver)")
    sender: str = Field(..., min_length=1, description="Отправитель")
    receiver: str = Field(..., min_length=1, description="Получатель")

    flow_rate: float = Field(0.0, ge=0, description="Ставка потока (amount/second)")

    created_at: float = Field(..., description="Момент создания")
    updated_at: float = Field(..., description="Момент последнего изменения ставки")

    @property
    def is_active(self) -> bool:
        return self.flow_rate != 0
