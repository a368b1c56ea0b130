"""
Dispatch endpoints.

Hospitals create dispatch requests, ambulance crews accept and complete
them.  The mobile client polls ``/api/dispatches``; the hospital board
polls ``/api/hospital/dispatches`` which splits active from completed
work.  State changes are delegated to :mod:`ambulance.services.dispatches`
where each transition is one conditional update.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers.dispatch import DispatchAcceptSerializer, DispatchCreateSerializer
from ..services import dispatches as svc


@api_view(['POST'])
def dispatch_create(request):
    """Create a new unassigned dispatch from a hospital request."""
    data = DispatchCreateSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    dispatch = svc.create_dispatch(data.validated_data)
    return Response({
        'ok': True,
        'message': 'Dispatch request processed successfully',
        'id': dispatch.id,
    })


@api_view(['PUT'])
def dispatch_accept(request, pk: int):
    """Assign the dispatch to the calling ambulance if nobody has yet."""
    data = DispatchAcceptSerializer(data=request.data)
    data.is_valid(raise_exception=True)
    updated = svc.accept_dispatch(pk, data.validated_data['ambulanceId'])
    return Response({'ok': True, 'message': 'Dispatch accepted successfully', 'updated': updated})


@api_view(['PUT'])
def dispatch_complete(request, pk: int):
    """Mark an accepted dispatch as completed."""
    updated = svc.complete_dispatch(pk)
    return Response({'ok': True, 'message': 'Dispatch marked as completed successfully.', 'updated': updated})


@api_view(['GET'])
def dispatch_detail(request, pk: int):
    return Response(svc.format_dispatch(svc.get_dispatch(pk)))


@api_view(['GET'])
def dispatch_list(request):
    """All dispatches, most recent first."""
    return Response([svc.format_dispatch(d) for d in svc.list_dispatches()])


@api_view(['GET'])
def hospital_dispatch_board(request):
    return Response(svc.hospital_dispatches())
