from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import views as drf_views, generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from accounts.models import Contractor
from accounts.permissions import IsHomeowner, IsContractor
from homebid_api.exceptions import NotFoundError
from . import serializers as my_serializers
from .filters import ProjectFilter
from .models import Project, Bid
from .permissions import IsProjectOwnerOrReadOnly
from .services import BidService


class ListCreateProjectAPIView(generics.ListCreateAPIView):
    """
    GET lists every project with its homeowner and bid count.
    POST lets a homeowner post a new project.
    """
    serializer_class = my_serializers.ProjectSerializer
    filterset_class = ProjectFilter

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsHomeowner()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):
        return (
            Project.objects.select_related('homeowner')
            .annotate(bid_count=Count('bids'))
            .order_by('-created_at', '-id')
        )

    @swagger_auto_schema(operation_summary="List projects", responses={200: my_serializers.ProjectSerializer(many=True)})
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @swagger_auto_schema(operation_summary="Post a new project", responses={201: my_serializers.ProjectSerializer, 400: "Invalid input"})
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class RetrieveUpdateProjectAPIView(generics.RetrieveUpdateAPIView):
    permission_classes = [permissions.IsAuthenticated, IsProjectOwnerOrReadOnly]
    lookup_field = 'id'
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_serializer_class(self):
        if self.request.method == 'GET':
            return my_serializers.ProjectDetailSerializer
        return my_serializers.ProjectSerializer

    def get_queryset(self):
        return Project.objects.select_related('homeowner').prefetch_related('bids__contractor__user')


class ListUserProjectsAPIView(generics.ListAPIView):
    serializer_class = my_serializers.ProjectSerializer
    filterset_class = ProjectFilter

    def get_queryset(self):
        return (
            Project.objects.filter(homeowner_id=self.kwargs['user_id'])
            .select_related('homeowner')
            .annotate(bid_count=Count('bids'))
            .order_by('-created_at', '-id')
        )


class ListProjectBidsAPIView(generics.ListAPIView):
    serializer_class = my_serializers.BidWithContractorSerializer
    filter_backends = []

    @swagger_auto_schema(
        operation_summary="List bids on a project",
        responses={200: my_serializers.BidWithContractorSerializer(many=True), 404: "Not found"}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        project = get_object_or_404(Project, id=self.kwargs['project_id'])
        return BidService().list_project_bids(project_id=project.id)


class ListContractorBidsAPIView(generics.ListAPIView):
    serializer_class = my_serializers.BidWithProjectSerializer
    filter_backends = []

    def get_queryset(self):
        contractor = get_object_or_404(Contractor, id=self.kwargs['contractor_id'])
        return BidService().list_contractor_bids(contractor_id=contractor.id)


class CreateBidAPIView(drf_views.APIView):
    permission_classes = [permissions.IsAuthenticated, IsContractor]

    @swagger_auto_schema(
        operation_summary="Submit a bid on a project",
        request_body=my_serializers.CreateBidSerializer,
        responses={200: my_serializers.BidSerializer, 400: "Validation error"}
    )
    def post(self, request):
        serializer = my_serializers.CreateBidSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        bid = BidService().submit_bid(
            project_id=data['projectId'],
            contractor_id=data['contractorId'],
            amount=data['amount'],
            timeline=data['timeline'],
            description=data.get('description', ""),
        )
        return Response(my_serializers.BidSerializer(bid).data, status=status.HTTP_200_OK)


class UpdateBidStatusAPIView(drf_views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(
        operation_summary="Accept or reject a bid",
        manual_parameters=[
            openapi.Parameter(
                'id',
                openapi.IN_PATH,
                description="Bid ID",
                type=openapi.TYPE_INTEGER,
            )
        ],
        request_body=my_serializers.UpdateBidStatusSerializer,
        responses={
            200: my_serializers.BidSerializer,
            400: "Invalid transition",
            403: "Forbidden",
            404: "Not found",
        }
    )
    def put(self, request, id):
        serializer = my_serializers.UpdateBidStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        bid = Bid.objects.select_related('project').filter(id=id).first()
        if bid is None:
            raise NotFoundError("Bid not found.")
        if bid.project.homeowner_id != request.user.id and not request.user.is_staff:
            raise PermissionDenied("Only the project owner can accept or reject bids.")

        bid = BidService().set_bid_status(bid_id=bid.id, new_status=serializer.validated_data['status'])
        return Response(my_serializers.BidSerializer(bid).data, status=status.HTTP_200_OK)
