from rest_framework import serializers

from accounts.models import Contractor
from accounts.serializers import UserSummarySerializer, ContractorSerializer
from .models import Project, Bid


class ProjectSerializer(serializers.ModelSerializer):
    """
    Serializer for creating, listing and updating projects.

    Status is read-only: it only moves through bid acceptance and deposit
    settlement. The homeowner is the authenticated user on create.
    """
    homeownerId = serializers.IntegerField(source='homeowner_id', read_only=True)
    budgetMin = serializers.IntegerField(source='budget_min', required=False, allow_null=True, min_value=0)
    budgetMax = serializers.IntegerField(source='budget_max', required=False, allow_null=True, min_value=0)
    depositPercentage = serializers.IntegerField(source='deposit_percentage', required=False, min_value=1, max_value=100)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    homeowner = UserSummarySerializer(read_only=True)
    bidCount = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id', 'homeownerId', 'title', 'description', 'category', 'budgetMin', 'budgetMax',
            'timeline', 'location', 'images', 'status', 'depositPercentage', 'createdAt', 'updatedAt',
            'homeowner', 'bidCount',
        ]
        read_only_fields = ['id', 'status']

    def get_bidCount(self, obj):
        count = getattr(obj, 'bid_count', None)
        if count is None:
            count = obj.bids.count()
        return count

    def validate(self, attrs):
        budget_min = attrs.get('budget_min', getattr(self.instance, 'budget_min', None))
        budget_max = attrs.get('budget_max', getattr(self.instance, 'budget_max', None))
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            raise serializers.ValidationError("budgetMin cannot exceed budgetMax.")
        return attrs

    def create(self, validated_data):
        return Project.objects.create(homeowner=self.context['request'].user, **validated_data)


class BidSerializer(serializers.ModelSerializer):
    projectId = serializers.IntegerField(source='project_id', read_only=True)
    contractorId = serializers.IntegerField(source='contractor_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Bid
        fields = ['id', 'projectId', 'contractorId', 'amount', 'timeline', 'description', 'status', 'createdAt']
        read_only_fields = fields


class BidWithContractorSerializer(BidSerializer):
    """Bid row joined with the bidding contractor and the contractor's user."""
    contractor = ContractorSerializer(read_only=True)

    class Meta(BidSerializer.Meta):
        fields = BidSerializer.Meta.fields + ['contractor']
        read_only_fields = fields


class ProjectWithHomeownerSerializer(serializers.ModelSerializer):
    homeowner = UserSummarySerializer(read_only=True)
    depositPercentage = serializers.IntegerField(source='deposit_percentage', read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'title', 'category', 'location', 'status', 'depositPercentage', 'homeowner']
        read_only_fields = fields


class BidWithProjectSerializer(BidSerializer):
    """Bid row joined with its project and the project's homeowner."""
    project = ProjectWithHomeownerSerializer(read_only=True)

    class Meta(BidSerializer.Meta):
        fields = BidSerializer.Meta.fields + ['project']
        read_only_fields = fields


class ProjectDetailSerializer(ProjectSerializer):
    bids = BidWithContractorSerializer(many=True, read_only=True)

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ['bids']


class CreateBidSerializer(serializers.Serializer):
    """
    Input for bid submission. Business rules (positive amount, open project)
    are enforced by BidService so they hold for every caller.
    """
    projectId = serializers.IntegerField()
    contractorId = serializers.IntegerField()
    amount = serializers.IntegerField()
    timeline = serializers.CharField(allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_contractorId(self, value):
        request = self.context.get('request')
        if request is not None and not Contractor.objects.filter(id=value, user=request.user).exists():
            raise serializers.ValidationError("You can only bid with your own contractor profile.")
        return value


class UpdateBidStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
