from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    ExpenseSerializer,
    ExpenseFilterSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
)

from apps.rooms.services import RoomNotFoundError, NotMemberError
from apps.rounds.services import RoundNotFoundError, RoundClosedError
from apps.expenses.services import (
    create_expense,
    update_expense,
    delete_expense,
    get_expense_for_member,
    list_round_expenses,
    # Exceptions
    ExpenseNotFoundError,
    NotExpenseCreatorError,
    InvalidExpenseError,
    InvalidPayerError,
)


class ExpensePagination(PageNumberPagination):
    """Custom pagination for expenses."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ExpenseViewSet(viewsets.ViewSet):
    """
    ViewSet for expenses.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Expenses of the room's open round (or ?round=)
    create: Log an expense in the open round
    retrieve: Get a single expense
    partial_update: Edit an expense (creator only, open round only)
    destroy: Delete an expense (creator only, open round only)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(
        parameters=[
            OpenApiParameter('room', str, required=True, description='Room ID'),
            OpenApiParameter('round', str, required=False, description='Round ID (defaults to open round)'),
        ],
        responses={200: ExpenseSerializer(many=True)},
    )
    def list(self, request):
        filter_serializer = ExpenseFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            expenses = list_round_expenses(
                room_id=params['room'],
                user=request.user,
                round_id=params.get('round'),
            )
        except (RoomNotFoundError, RoundNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        paginator = ExpensePagination()
        page = paginator.paginate_queryset(expenses, request, view=self)
        return paginator.get_paginated_response(ExpenseSerializer(page, many=True).data)

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseSerializer})
    def create(self, request):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            expense = create_expense(
                room_id=data['room'],
                created_by=request.user,
                title=data['title'],
                amount=data['amount'],
                payer_id=data.get('payer'),
                notes=data.get('notes', ''),
            )
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (InvalidExpenseError, InvalidPayerError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ExpenseSerializer})
    def retrieve(self, request, pk=None):
        try:
            expense = get_expense_for_member(expense_id=pk, user=request.user)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def partial_update(self, request, pk=None):
        serializer = ExpenseUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            expense = update_expense(
                expense_id=pk,
                user=request.user,
                title=data.get('title'),
                amount=data.get('amount'),
                payer_id=data.get('payer'),
                notes=data.get('notes'),
            )
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, NotExpenseCreatorError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except RoundClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except (InvalidExpenseError, InvalidPayerError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ExpenseSerializer(expense).data)

    def destroy(self, request, pk=None):
        try:
            delete_expense(expense_id=pk, user=request.user)
        except ExpenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, NotExpenseCreatorError) as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except RoundClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(status=status.HTTP_204_NO_CONTENT)
