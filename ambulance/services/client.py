"""
HTTP client used by ambulance crews to poll and act on dispatches.

Responses are decoded through :func:`decode_dispatch`, which fills any
absent or null optional field from :data:`DISPATCH_DEFAULTS` so a
partial row from an older server never breaks the crew's list.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import requests
from django.conf import settings

DISPATCH_DEFAULTS: dict[str, Any] = {
    'patientId': '',
    'patientName': 'Unknown',
    'patientAddress': 'Unknown',
    'condition': 'Unknown',
    'timestamp': 'Unknown',
    'medicalHistory': 'Not provided',
    'completed': 0,
    'ambulanceId': None,
    'completionTime': None,
    'patientLatitude': None,
    'patientLongitude': None,
}


class DispatchClientError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@dataclass
class DispatchView:
    id: int
    patient_id: str
    patient_name: str
    patient_address: str
    condition: str
    timestamp: str
    medical_history: str
    completed: int
    ambulance_id: Optional[str] = None
    completion_time: Optional[str] = None
    patient_latitude: Optional[float] = None
    patient_longitude: Optional[float] = None

    @property
    def action(self) -> Optional[str]:
        """The button a crew sees for this dispatch."""
        if self.ambulance_id is None:
            return 'accept'
        if not self.completed:
            return 'complete'
        return None


def _value(payload: dict, key: str) -> Any:
    value = payload.get(key)
    return DISPATCH_DEFAULTS[key] if value is None else value


def _to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def decode_dispatch(payload: dict) -> DispatchView:
    """Decode one dispatch object; only a missing or bad ``id`` is fatal."""
    raw_id = payload.get('id') if isinstance(payload, dict) else None
    if isinstance(raw_id, bool) or raw_id is None:
        raise DispatchClientError(f'Dispatch without a valid id: {payload!r}')
    try:
        dispatch_id = int(raw_id)
    except (TypeError, ValueError):
        raise DispatchClientError(f'Dispatch without a valid id: {payload!r}')
    ambulance_id = payload.get('ambulanceId')
    return DispatchView(
        id=dispatch_id,
        patient_id=str(_value(payload, 'patientId')),
        patient_name=str(_value(payload, 'patientName')),
        patient_address=str(_value(payload, 'patientAddress')),
        condition=str(_value(payload, 'condition')),
        timestamp=str(_value(payload, 'timestamp')),
        medical_history=str(_value(payload, 'medicalHistory')),
        completed=_to_int(_value(payload, 'completed'), DISPATCH_DEFAULTS['completed']),
        ambulance_id=str(ambulance_id) if ambulance_id is not None else None,
        completion_time=_value(payload, 'completionTime'),
        patient_latitude=_to_float(payload.get('patientLatitude')),
        patient_longitude=_to_float(payload.get('patientLongitude')),
    )


class DispatchClient:
    """Thin wrapper over the dispatch REST API for one ambulance."""

    def __init__(self, base_url: Optional[str] = None, ambulance_id: Optional[str] = None,
                 timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.DISPATCH_API_URL).rstrip('/')
        self.ambulance_id = ambulance_id or settings.AMBULANCE_ID
        self.timeout = timeout or settings.DISPATCH_CLIENT_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f'{self.base_url}{path}'
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise DispatchClientError(
                f'Cannot reach dispatch server at {self.base_url}: {exc}. '
                'Make sure both devices are on the same network.'
            ) from exc
        try:
            data = r.json()
        except ValueError:
            data = None
        if not 200 <= r.status_code < 300:
            error = (data or {}).get('error') if isinstance(data, dict) else None
            message = (error or {}).get('message') if isinstance(error, dict) else None
            raise DispatchClientError(
                str(message or f'{method} {path} failed with HTTP {r.status_code}'),
                status_code=r.status_code,
                code=(error or {}).get('code') if isinstance(error, dict) else None,
            )
        return data

    def list_dispatches(self) -> list[DispatchView]:
        data = self._request('GET', '/api/dispatches')
        if not isinstance(data, list):
            raise DispatchClientError('Unexpected response format for dispatch list.')
        return [decode_dispatch(item) for item in data]

    def get_dispatch(self, dispatch_id: int) -> DispatchView:
        return decode_dispatch(self._request('GET', f'/api/dispatch/{dispatch_id}'))

    def hospital_dispatches(self) -> dict[str, list[DispatchView]]:
        data = self._request('GET', '/api/hospital/dispatches') or {}
        if not isinstance(data, dict):
            raise DispatchClientError('Unexpected response format for hospital dispatches.')
        return {
            'active': [decode_dispatch(d) for d in data.get('activeDispatches') or []],
            'completed': [decode_dispatch(d) for d in data.get('completedDispatches') or []],
        }

    def accept(self, dispatch_id: int) -> dict:
        return self._request('PUT', f'/api/dispatch/{dispatch_id}/accept', json={'ambulanceId': self.ambulance_id})

    def complete(self, dispatch_id: int) -> dict:
        return self._request('PUT', f'/api/dispatch/{dispatch_id}/complete')
