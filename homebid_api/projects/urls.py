from django.urls import path

from . import views as my_views

urlpatterns = [
    path('projects', my_views.ListCreateProjectAPIView.as_view(), name='list-create-project'),
    path('projects/<int:id>', my_views.RetrieveUpdateProjectAPIView.as_view(), name='retrieve-update-project'),
    path('projects/<int:project_id>/bids', my_views.ListProjectBidsAPIView.as_view(), name='list-project-bids'),
    path('users/<int:user_id>/projects', my_views.ListUserProjectsAPIView.as_view(), name='list-user-projects'),

    path('bids', my_views.CreateBidAPIView.as_view(), name='create-bid'),
    path('bids/<int:id>', my_views.UpdateBidStatusAPIView.as_view(), name='update-bid-status'),
    path('contractors/<int:contractor_id>/bids', my_views.ListContractorBidsAPIView.as_view(), name='list-contractor-bids'),
]
