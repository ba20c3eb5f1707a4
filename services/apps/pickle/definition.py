from services.apps.definition import AppDefinition, AppGroup
from services.positions.models import ContractType, Network

PICKLE_DEFINITION = AppDefinition(
    id="pickle",
    name="Pickle",
    groups={
        "jar": AppGroup(id="jar", type=ContractType.APP_TOKEN, label="Jars"),
        "masterchefV2Farm": AppGroup(id="masterchefV2Farm", type=ContractType.POSITION, label="Farms"),
    },
    networks=(
        Network.ETHEREUM_MAINNET,
        Network.POLYGON_MAINNET,
        Network.ARBITRUM_MAINNET,
    ),
)
