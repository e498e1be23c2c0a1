"""Static and templated manifest bodies for the tectonic-system namespace.

Templates reference ``${KubeAddonOperatorImage}`` and ``${PullSecret}``.
"""

BINDING_DISCOVERY = """\
apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRoleBinding
metadata:
  name: discovery
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: ClusterRole
  name: system:discovery
subjects:
- apiGroup: rbac.authorization.k8s.io
  kind: Group
  name: system:unauthenticated
"""

APP_VERSION_KUBE_ADDON = """\
apiVersion: tco.coreos.com/v1
kind: AppVersion
metadata:
  name: kube-addon
  namespace: tectonic-system
  labels:
    managed-by-channel-operator: "true"
spec:
  desiredVersion:
  paused: false
status:
  currentVersion:
  paused: false
upgradereq: 1
upgradecomp: 0
"""

KUBE_ADDON_OPERATOR = """\
apiVersion: apps/v1beta2
kind: Deployment
metadata:
  name: kube-addon-operator
  namespace: tectonic-system
  labels:
    k8s-app: kube-addon-operator
    managed-by-channel-operator: "true"
spec:
  replicas: 1
  selector:
    matchLabels:
      k8s-app: kube-addon-operator
  template:
    metadata:
      labels:
        k8s-app: kube-addon-operator
        tectonic-app-version-name: kube-addon
    spec:
      containers:
      - name: kube-addon-operator
        image: ${KubeAddonOperatorImage}
        resources:
          limits:
            cpu: 20m
            memory: 50Mi
          requests:
            cpu: 20m
            memory: 50Mi
        volumeMounts:
        - name: cluster-config
          mountPath: /etc/cluster-config
      imagePullSecrets:
      - name: coreos-pull-secret
      nodeSelector:
        node-role.kubernetes.io/master: ""
      restartPolicy: Always
      securityContext:
        runAsNonRoot: true
        runAsUser: 65534
      volumes:
      - name: cluster-config
        configMap:
          name: cluster-config-v1
          items:
          - key: addon-config
            path: addon-config
      tolerations:
      - key: "node-role.kubernetes.io/master"
        operator: "Exists"
        effect: "NoSchedule"
"""

ROLE_ADMIN = """\
apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: admin
rules:
- apiGroups: ["*"]
  resources: ["*"]
  verbs: ["*"]
- nonResourceURLs: ["*"]
  verbs: ["*"]
"""

ROLE_USER = """\
apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRole
metadata:
  name: user
rules:
- apiGroups: [""]
  resources: ["bindings", "configmaps", "events", "pods", "replicationcontrollers",
              "secrets", "services", "serviceaccounts"]
  verbs: ["get", "list", "watch"]
- apiGroups: ["apps", "batch", "extensions"]
  resources: ["*"]
  verbs: ["get", "list", "watch"]
- nonResourceURLs: ["*"]
  verbs: ["get"]
"""

BINDING_ADMIN = """\
apiVersion: rbac.authorization.k8s.io/v1
kind: ClusterRoleBinding
metadata:
  name: admin-user
subjects:
- kind: ServiceAccount
  namespace: tectonic-system
  name: default
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: ClusterRole
  name: admin
"""

PULL_TECTONIC_SYSTEM = """\
{
  "apiVersion": "v1",
  "kind": "Secret",
  "type": "kubernetes.io/dockerconfigjson",
  "metadata": {
    "namespace": "tectonic-system",
    "name": "coreos-pull-secret"
  },
  "data": {
    ".dockerconfigjson": "${PullSecret}"
  }
}
"""
