from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from . import services
from .serializers import ContractSerializer, GenerateContractSerializer, SignContractSerializer


class GenerateContractView(APIView):
    """
    POST /api/contracts/generate/  { investment_id }
    Investor, project owner or admin; once per investment.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = GenerateContractSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        contract = services.generate_contract(request.user, serializer.validated_data["investment_id"])
        return Response(
            {
                "success": True,
                "message": "Contract generated successfully",
                "contract": ContractSerializer(contract).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ContractDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, contract_id):
        contract = services.view_contract(request.user, contract_id)
        return Response({"success": True, "contract": ContractSerializer(contract).data})


class ContractByInvestmentView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, investment_id):
        contract = services.get_contract_by_investment(request.user, investment_id)
        return Response({"success": True, "contract": ContractSerializer(contract).data})


class SignContractView(APIView):
    """POST /api/contracts/<id>/sign/  { signer: investor | entrepreneur | admin }"""
    permission_classes = [IsAuthenticated]
    throttle_scope = "contract-sign"

    def post(self, request, contract_id):
        serializer = SignContractSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        signer = serializer.validated_data["signer"]

        contract, newly_signed = services.sign_contract(request.user, contract_id, signer)
        message = f"Contract signed by {signer}" if newly_signed else f"Contract already signed by {signer}"
        return Response({
            "success": True,
            "message": message,
            "contract": ContractSerializer(contract).data,
        })


class DownloadContractView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, contract_id):
        contract, url = services.download_contract(request.user, contract_id)
        return Response({
            "success": True,
            "contract_id": str(contract.pk),
            "pdf_url": request.build_absolute_uri(url),
        })


class CompleteContractView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, contract_id):
        contract = services.complete_contract(request.user, contract_id)
        return Response({"success": True, "contract": ContractSerializer(contract).data})


class CancelContractView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, contract_id):
        contract = services.cancel_contract(request.user, contract_id)
        return Response({"success": True, "contract": ContractSerializer(contract).data})
